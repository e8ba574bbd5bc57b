"""
Core data models for the Angular i18n text extractor.

Pydantic models describe what a session produces (entries, per-file results,
the output artifact). The per-literal records used during classification are
plain dataclasses: they are created for every candidate string and thrown away
immediately, so they skip validation.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class SourceKind(str, Enum):
    """Kinds of source files the extractor understands."""

    MARKUP = "markup"
    LOGIC = "logic"


class FileStatus(str, Enum):
    """Outcome of processing one source file."""

    EXTRACTED = "extracted"
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
    SKIPPED = "skipped"


# =============================================================================
# Classification Models
# =============================================================================


@dataclass(frozen=True)
class ClassificationContext:
    """Where in a logic file a candidate string was found."""

    before: str = ""
    line: str = ""
    is_import: bool = False
    is_decorator: bool = False
    is_throw: bool = False
    is_console: bool = False
    is_class_property: bool = False
    is_in_method: bool = False
    is_object_property: bool = False
    is_array_element: bool = False
    is_call_argument: bool = False
    is_type_position: bool = False
    is_field_initializer: bool = False
    field_annotation: Optional[str] = None

    @property
    def is_class_level(self) -> bool:
        """A bare field initializer, not an assignment inside a method body."""
        return self.is_class_property and not self.is_in_method

    @property
    def accepts_observable(self) -> bool:
        """A field initializer whose declared type can hold an Observable."""
        if not self.is_field_initializer:
            return False
        return self.field_annotation is None or self.field_annotation.startswith("Observable<")


@dataclass(frozen=True)
class StringLiteral:
    """A quoted literal found in a logic file."""

    start: int
    end: int
    quote: str
    value: str

    @property
    def raw(self) -> str:
        return f"{self.quote}{self.value}{self.quote}"


# =============================================================================
# Extraction Models
# =============================================================================


class ExtractedEntry(BaseModel):
    """One extracted piece of display text and its generated key."""

    key: str = Field(..., min_length=1, description="Generated translation key")
    text: str = Field(..., description="Verbatim extracted text or inner markup")


class FileExtractionResult(BaseModel):
    """What happened to a single source file."""

    path: Path
    kind: SourceKind
    entries: List[ExtractedEntry] = Field(default_factory=list)
    substitutions: int = Field(0, ge=0, description="Rewrites applied to the file")
    status: FileStatus = FileStatus.EXTRACTED
    error: Optional[str] = Field(None, description="Why the file was skipped")

    @property
    def skipped(self) -> bool:
        return self.status == FileStatus.SKIPPED


# =============================================================================
# Artifact Models
# =============================================================================


class ArtifactMetadata(BaseModel):
    """Metadata block of the output artifact."""

    model_config = ConfigDict(populate_by_name=True)

    extracted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="extractedAt",
    )
    total_texts: int = Field(..., ge=0, alias="totalTexts")
    key_prefix: str = Field(..., alias="keyPrefix")


class ExtractionArtifact(BaseModel):
    """The JSON document written at the end of a session."""

    locale: str
    translations: Dict[str, str] = Field(default_factory=dict)
    metadata: ArtifactMetadata

    def to_json(self) -> str:
        """Serialise with the camelCase field names consumers expect."""
        return self.model_dump_json(by_alias=True, indent=2)


class ExtractionSummary(BaseModel):
    """Per-run statistics reported by the CLI."""

    markup_files: int = 0
    logic_files: int = 0
    rewritten_files: int = 0
    skipped_files: List[Path] = Field(default_factory=list)
    total_texts: int = 0
    output_path: Optional[Path] = None

"""
Component-logic extractor.

Classifies every string literal of a TypeScript file in context and, when
rewriting, replaces accepted literals inside a class with a TranslateService
lookup:

* ``title = 'Welcome';`` (a field initializer with no annotation, or one typed
  ``Observable<...>``) becomes ``title = this.translate.get('app.x.welcome_1');``
* anything else (typed fields, call arguments, thrown errors, assignments in
  methods, ternaries) becomes ``this.translate.instant('app.x.welcome_1')``.

String literal types (``mode: 'edit' | 'view'``) are never candidates.

A rewritten file also gets the service import and constructor injection.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from ng_i18n_extract.classifier import TextClassifier, default_classifier
from ng_i18n_extract.keys import KeyGenerator, derive_component_context
from ng_i18n_extract.logic.context import build_context, enclosing_class
from ng_i18n_extract.logic.scaffold import relative_service_import, wire_lookup_service
from ng_i18n_extract.logic.scanner import ScannedSource, scan_source, unescape
from ng_i18n_extract.models import (
    ExtractedEntry,
    FileExtractionResult,
    FileStatus,
    SourceKind,
    StringLiteral,
)
from ng_i18n_extract.rewrite import Substitution, apply_substitutions
from ng_i18n_extract.utils.errors import SourceFileError
from ng_i18n_extract.utils.files import read_source, write_source
from ng_i18n_extract.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

_KEY_FOLLOWER_RE = re.compile(r"^\s*\??:")


def lookup_expression(key: str, declarative: bool = False) -> str:
    """TranslateService call for ``key``; ``get`` returns an Observable."""
    method = "get" if declarative else "instant"
    return f"this.translate.{method}('{key}')"


def is_object_key(scanned: ScannedSource, literal: StringLiteral) -> bool:
    """``{ 'Content-Type': ... }``: the literal names a property."""
    brackets = scanned.brackets_at(literal)
    if not brackets or brackets[-1][0] != "{":
        return False
    if not _KEY_FOLLOWER_RE.match(scanned.masked[literal.end : literal.end + 40]):
        return False
    return scanned.masked[max(0, literal.start - 200) : literal.start].rstrip()[-1:] in ("{", ",")


class LogicExtractor:
    """Extracts display text from Angular component classes."""

    def __init__(
        self,
        key_generator: KeyGenerator,
        classifier: TextClassifier = default_classifier,
        use_component_context: bool = True,
        src_root: Optional[Path] = None,
        shared_dir: str = "shared",
    ) -> None:
        """
        Initialize the extractor.

        Args:
            key_generator: Session-wide key generator
            classifier: Display-text classifier
            use_component_context: Namespace keys with a token from the file name
            src_root: Source root holding the shared service directory
            shared_dir: Service directory relative to ``src_root``
        """
        self.key_generator = key_generator
        self.classifier = classifier
        self.use_component_context = use_component_context
        self.src_root = src_root
        self.shared_dir = shared_dir

    async def extract_file(self, path: Path, replace: bool = False) -> FileExtractionResult:
        """
        Extract display text from one TypeScript file, optionally rewriting it.

        Unreadable or unwritable files are logged and reported as skipped.
        """
        with LogContext(source_file=str(path)):
            try:
                source = await read_source(path)
            except SourceFileError as e:
                logger.warning(f"Skipping TypeScript file {path}: {e.reason}")
                return FileExtractionResult(
                    path=path, kind=SourceKind.LOGIC, status=FileStatus.SKIPPED, error=e.reason
                )

            entries, substitutions = self.extract(source, path)
            result = FileExtractionResult(path=path, kind=SourceKind.LOGIC, entries=entries)

            if not replace or not substitutions:
                logger.debug(f"Extracted {len(entries)} texts from {path}")
                return result

            rewritten, applied = self.rewrite(source, substitutions, path)
            try:
                await write_source(path, rewritten)
            except SourceFileError as e:
                logger.warning(f"Skipping TypeScript file {path}: {e.reason}")
                return FileExtractionResult(
                    path=path, kind=SourceKind.LOGIC, status=FileStatus.SKIPPED, error=e.reason
                )

            logger.info(f"Rewrote {applied} literals in {path}")
            result.substitutions = applied
            result.status = FileStatus.REWRITTEN
            return result

    def extract(self, source: str, path: Path) -> Tuple[List[ExtractedEntry], List[Substitution]]:
        """
        Classify every literal of ``source`` and issue keys for display text.

        Returns:
            Entries in source order, and substitutions for the rewritable ones
        """
        component = derive_component_context(path) if self.use_component_context else None
        scanned = scan_source(source)

        entries: List[ExtractedEntry] = []
        substitutions: List[Substitution] = []

        for literal in scanned.literals:
            text = unescape(literal.value)
            if not text.strip() or is_object_key(scanned, literal):
                continue

            context = build_context(scanned, literal)
            verdict = self.classifier.explain(text, context)
            if not verdict:
                logger.debug(f"Rejected {literal.raw[:40]!r} ({verdict.reason})")
                continue

            key = self.key_generator.generate(text, component)
            entries.append(ExtractedEntry(key=key, text=text))

            if enclosing_class(scanned, literal) is None:
                # Outside a class there is no ``this.translate`` to call.
                logger.debug(f"Extracted {key} without rewrite: not inside a class")
                continue

            substitutions.append(
                Substitution(literal.start, literal.end, lookup_expression(key, context.accepts_observable))
            )

        return entries, substitutions

    def rewrite(self, source: str, substitutions: List[Substitution], path: Path) -> Tuple[str, int]:
        """Apply substitutions and wire the TranslateService into the file."""
        rewritten, applied = apply_substitutions(source, substitutions)
        if not applied:
            return source, 0

        root = self.src_root if self.src_root is not None else Path(path).parent
        import_path = relative_service_import(path, root, self.shared_dir)
        return wire_lookup_service(rewritten, import_path), applied

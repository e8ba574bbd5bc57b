"""
Extraction session.

One session is one run over a source directory: it owns the key generator,
so keys stay unique across every file it processes, and the ordered
key -> text mapping written out as the extraction artifact.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Union

from ng_i18n_extract.classifier import TextClassifier, default_classifier
from ng_i18n_extract.config import Settings, get_settings
from ng_i18n_extract.discovery import discover_sources
from ng_i18n_extract.keys import KeyGenerator
from ng_i18n_extract.logic.extractor import LogicExtractor
from ng_i18n_extract.logic.scaffold import ensure_http_client_module, ensure_lookup_service
from ng_i18n_extract.markup.extractor import MarkupExtractor
from ng_i18n_extract.models import (
    ArtifactMetadata,
    ExtractionArtifact,
    ExtractionSummary,
    FileExtractionResult,
    FileStatus,
    SourceKind,
)
from ng_i18n_extract.utils.errors import (
    ArtifactWriteError,
    OutputDirectoryError,
    SourceFileError,
)
from ng_i18n_extract.utils.logging import get_logger, log_performance

logger = get_logger(__name__)


class ExtractionSession:
    """Collects display text from one source tree into one artifact."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        classifier: TextClassifier = default_classifier,
    ) -> None:
        """
        Initialize the session.

        Args:
            settings: Options for this run (defaults to the global settings)
            classifier: Display-text classifier shared by both extractors
        """
        self.settings = settings or get_settings()
        self.key_generator = KeyGenerator(
            self.settings.key_prefix,
            max_slug_length=self.settings.max_slug_length,
        )
        self.translations: Dict[str, str] = {}
        self.results: List[FileExtractionResult] = []
        self.output_path: Optional[Path] = None

        self.markup_extractor = MarkupExtractor(
            self.key_generator,
            classifier=classifier,
            use_component_context=self.settings.component_context,
        )
        self.logic_extractor = LogicExtractor(
            self.key_generator,
            classifier=classifier,
            use_component_context=self.settings.component_context,
            src_root=self.settings.src_path,
            shared_dir=self.settings.shared_service_dir,
        )

    @log_performance
    async def run(self, directory: Optional[Union[str, Path]] = None) -> ExtractionArtifact:
        """
        Extract every template and logic file below ``directory``.

        Files are processed one at a time in discovery order, templates first.
        Per-file failures are logged and skipped.

        Args:
            directory: Root to scan (defaults to ``settings.src_path``)

        Returns:
            The artifact for everything extracted so far

        Raises:
            SourceDirectoryNotFoundError: If the root does not exist
        """
        root = Path(directory) if directory is not None else self.settings.src_path
        self.logic_extractor.src_root = root
        replace = self.settings.replace

        sources = discover_sources(root)
        logger.info(
            f"Found {len(sources.markup_files)} HTML files and "
            f"{len(sources.logic_files)} TypeScript files"
        )

        if replace and not self.settings.exclude_ts:
            await self._scaffold(root)

        for path in sources.markup_files:
            self._record(await self.markup_extractor.extract_file(path, replace=replace))

        if self.settings.exclude_ts:
            logger.info("TypeScript extraction skipped due to exclude_ts option")
        else:
            for path in sources.logic_files:
                self._record(await self.logic_extractor.extract_file(path, replace=replace))

        logger.info(f"Extracted {len(self.translations)} texts from {root}")
        return self.build_artifact()

    async def _scaffold(self, root: Path) -> None:
        try:
            await ensure_lookup_service(root, self.settings.shared_service_dir)
        except SourceFileError as e:
            logger.warning(f"Could not create TranslateService: {e.reason}")
        await ensure_http_client_module(root)

    def _record(self, result: FileExtractionResult) -> None:
        self.results.append(result)
        if result.status == FileStatus.SKIPPED:
            return
        for entry in result.entries:
            self.translations[entry.key] = entry.text

    def build_artifact(self) -> ExtractionArtifact:
        """Snapshot the mapping as an artifact."""
        return ExtractionArtifact(
            locale=self.settings.locale,
            translations=dict(self.translations),
            metadata=ArtifactMetadata(
                total_texts=len(self.translations),
                key_prefix=self.settings.key_prefix,
            ),
        )

    async def save(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the artifact as JSON.

        Args:
            output_path: Destination (defaults to ``settings.output_path``)

        Returns:
            The path written

        Raises:
            OutputDirectoryError: If the destination directory cannot be created
            ArtifactWriteError: If the file cannot be written
        """
        path = Path(output_path) if output_path is not None else self.settings.output_path
        artifact = self.build_artifact()

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(str(path.parent), str(e)) from e

        try:
            await asyncio.to_thread(path.write_text, artifact.to_json(), encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(str(path), str(e)) from e

        self.output_path = path
        logger.info(f"Saved {artifact.metadata.total_texts} translations to {path}")
        return path

    def summary(self) -> ExtractionSummary:
        """Counts for the CLI report."""
        return ExtractionSummary(
            markup_files=sum(1 for r in self.results if r.kind == SourceKind.MARKUP),
            logic_files=sum(1 for r in self.results if r.kind == SourceKind.LOGIC),
            rewritten_files=sum(1 for r in self.results if r.status == FileStatus.REWRITTEN),
            skipped_files=[r.path for r in self.results if r.skipped],
            total_texts=len(self.translations),
            output_path=self.output_path,
        )


async def extract_texts(settings: Optional[Settings] = None) -> ExtractionSummary:
    """Run a session over ``settings.src_path`` and save the artifact."""
    session = ExtractionSession(settings)
    await session.run()
    await session.save()
    return session.summary()

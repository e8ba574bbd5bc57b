"""
Markup extractor.

Walks a template's elements by tag priority (buttons and links first, generic
containers last) and extracts:

* plain text of leaf elements,
* whole inner-markup fragments of elements mixing text and inline tags,
* display attributes (``title``, ``alt``, ``placeholder``, ``aria-label``).

When rewriting, every extracted location is replaced by
``{{ '<key>' | translate }}`` through exact source splices.
"""

from pathlib import Path
from typing import List, Optional, Set, Tuple

from ng_i18n_extract.classifier import TextClassifier, default_classifier
from ng_i18n_extract.keys import KeyGenerator, derive_component_context
from ng_i18n_extract.markup.tree import MarkupNode, MarkupTree, Span
from ng_i18n_extract.models import (
    ExtractedEntry,
    FileExtractionResult,
    FileStatus,
    SourceKind,
)
from ng_i18n_extract.rewrite import Substitution, apply_substitutions
from ng_i18n_extract.utils.errors import SourceFileError
from ng_i18n_extract.utils.files import read_source, write_source
from ng_i18n_extract.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

# Visited in this order. A fragment extracted later replaces its children's splices.
CONTENT_TAGS = (
    "button", "a", "label",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "li", "td", "th",
    "strong", "em", "b", "i",
)
GENERIC_CONTAINERS = ("span", "div")
TEXT_BEARING_TAGS = frozenset(
    {"p", "li", "h1", "h2", "h3", "h4", "h5", "h6", "button", "label", "a"}
)
DISPLAY_ATTRIBUTES = ("title", "alt", "placeholder", "aria-label")

BINDING_PREFIXES = ("*", "[", "(", "on", "bind-")
INTERPOLATION_MARKER = "{{"
TRANSLATED_MARKERS = ("{{ '", "' | translate }}")


def placeholder(key: str, quote: str = "'") -> str:
    """The template expression that looks ``key`` up at runtime."""
    return f"{{{{ {quote}{key}{quote} | translate }}}}"


def has_binding_attributes(node: MarkupNode) -> bool:
    """Structural directives, property/event bindings or interpolated attributes."""
    for name, value in node.attrs.items():
        if name.startswith(BINDING_PREFIXES) or INTERPOLATION_MARKER in value:
            return True
    return False


def is_translated(text: str) -> bool:
    return all(marker in text for marker in TRANSLATED_MARKERS)


class MarkupExtractor:
    """Extracts display text from Angular templates."""

    def __init__(
        self,
        key_generator: KeyGenerator,
        classifier: TextClassifier = default_classifier,
        use_component_context: bool = True,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            key_generator: Session-wide key generator
            classifier: Display-text classifier
            use_component_context: Namespace keys with a token from the file name
        """
        self.key_generator = key_generator
        self.classifier = classifier
        self.use_component_context = use_component_context

    async def extract_file(self, path: Path, replace: bool = False) -> FileExtractionResult:
        """
        Extract display text from one template, optionally rewriting it.

        Unreadable, unparsable or unwritable files are logged and reported as
        skipped; they never raise.
        """
        with LogContext(source_file=str(path)):
            try:
                source = await read_source(path)
                tree = MarkupTree.parse(source, str(path))
            except SourceFileError as e:
                logger.warning(f"Skipping template {path}: {e.reason}")
                return FileExtractionResult(
                    path=path, kind=SourceKind.MARKUP, status=FileStatus.SKIPPED, error=e.reason
                )

            entries, substitutions = self.extract_tree(tree, path)
            result = FileExtractionResult(path=path, kind=SourceKind.MARKUP, entries=entries)

            if not replace or not substitutions:
                logger.debug(f"Extracted {len(entries)} texts from {path}")
                return result

            rewritten, applied = apply_substitutions(source, substitutions)
            try:
                await write_source(path, rewritten)
            except SourceFileError as e:
                logger.warning(f"Skipping template {path}: {e.reason}")
                return FileExtractionResult(
                    path=path, kind=SourceKind.MARKUP, status=FileStatus.SKIPPED, error=e.reason
                )

            logger.info(f"Rewrote {applied} locations in {path}")
            result.substitutions = applied
            result.status = FileStatus.REWRITTEN
            return result

    def extract(self, source: str, path: Path) -> Tuple[List[ExtractedEntry], List[Substitution]]:
        """Extract from template text without touching the filesystem."""
        return self.extract_tree(MarkupTree.parse(source, str(path)), path)

    def extract_tree(
        self, tree: MarkupTree, path: Path
    ) -> Tuple[List[ExtractedEntry], List[Substitution]]:
        """
        Run the text pass and the attribute pass over a parsed template.

        Returns:
            Entries in key order, and the substitutions that would rewrite them
        """
        context = derive_component_context(path) if self.use_component_context else None
        entries: List[ExtractedEntry] = []
        substitutions: List[Substitution] = []

        visited: Set[int] = set()

        for tag in CONTENT_TAGS + GENERIC_CONTAINERS:
            for node in tree.find_all(tag):
                found = self._extract_node(tree, node, visited)
                if found is None:
                    continue
                label, text, span = found
                key = self.key_generator.generate(label, context)
                entries.append(ExtractedEntry(key=key, text=text))
                if span is not None:
                    substitutions.append(Substitution(span[0], span[1], placeholder(key)))

        for node in tree:
            for attr in DISPLAY_ATTRIBUTES:
                value = node.attrs.get(attr)
                if not value or INTERPOLATION_MARKER in value:
                    continue
                if not self.classifier.is_display_text(value):
                    continue
                key = self.key_generator.generate(value, context)
                entries.append(ExtractedEntry(key=key, text=value))
                span = node.attr_spans.get(attr)
                if span is not None:
                    substitutions.append(self._attribute_substitution(tree.source, span, key))

        return entries, substitutions

    def _extract_node(
        self,
        tree: MarkupTree,
        node: MarkupNode,
        visited: Set[int],
    ) -> Optional[Tuple[str, str, Optional[Span]]]:
        """
        Decide what, if anything, to extract from one element.

        Returns:
            The flattened text used for the key, the extracted text, and the
            source span it occupies; or None
        """
        if node.handle in visited:
            return None
        if node.tag in GENERIC_CONTAINERS and any(
            tree[handle].tag in TEXT_BEARING_TAGS for handle in node.descendants
        ):
            return None

        text = node.text.strip()
        if not text or self.classifier.is_excluded(text):
            return None
        if is_translated(text) or INTERPOLATION_MARKER in text:
            return None
        if has_binding_attributes(node):
            return None

        if node.has_element_children:
            if not self.classifier.is_display_text(text):
                return None
            visited.add(node.handle)
            visited.update(node.descendants)
            return (text,) + self._inner_fragment(tree, node, text)

        if self.classifier.is_display_text(text):
            visited.add(node.handle)
            return (text,) + self._inner_fragment(tree, node, text)

        return None

    @staticmethod
    def _inner_fragment(
        tree: MarkupTree, node: MarkupNode, fallback: str
    ) -> Tuple[str, Optional[Span]]:
        """Verbatim inner source with surrounding whitespace excluded from the span."""
        if node.inner is None:
            return fallback, None

        start, end = node.inner
        raw = tree.source[start:end]
        stripped = raw.strip()
        if not stripped:
            return fallback, None
        lead = len(raw) - len(raw.lstrip())
        return stripped, (start + lead, start + lead + len(stripped))

    @staticmethod
    def _attribute_substitution(source: str, span: Span, key: str) -> Substitution:
        start, end = span
        delimiter = source[start - 1] if start > 0 else ""
        if delimiter == "'":
            replacement = placeholder(key, quote='"')
        elif delimiter == '"':
            replacement = placeholder(key)
        else:
            # Unquoted value: the placeholder contains spaces and needs quoting.
            replacement = f'"{placeholder(key)}"'
        return Substitution(start, end, replacement)

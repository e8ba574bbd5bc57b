"""
Markup tree accessor.

Loads an Angular template with BeautifulSoup's ``html.parser`` builder and
exposes every element as a ``MarkupNode`` carrying exact offsets into the
original text: the start tag, the inner content and each attribute value.
The offsets let the extractor rewrite a template by splicing, without ever
re-serialising the parsed document (which would lowercase ``*ngIf`` and
friends and normalise void-element syntax).
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from ng_i18n_extract.utils.errors import MarkupParseError
from ng_i18n_extract.utils.logging import get_logger

logger = get_logger(__name__)

Span = Tuple[int, int]

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)

# A comment, or the opening "<name" / "</name" of a tag.
_TAG_TOKEN_RE = re.compile(r"<!--.*?-->|<(/?)([A-Za-z][\w:.-]*)", re.S)
_ATTRIBUTE_RE = re.compile(
    r"""([^\s"'>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)


@dataclass
class MarkupNode:
    """One element of a template."""

    handle: int
    tag: str
    attrs: Dict[str, str]
    text: str
    line: Optional[int]
    children: List[int] = field(default_factory=list)
    descendants: List[int] = field(default_factory=list)
    start_tag: Span = (0, 0)
    inner: Optional[Span] = None
    attr_spans: Dict[str, Span] = field(default_factory=dict)

    @property
    def has_element_children(self) -> bool:
        return bool(self.children)

    @property
    def is_void(self) -> bool:
        return self.inner is None


class MarkupTree:
    """Element nodes of one template, in document order."""

    def __init__(self, source: str, nodes: List[MarkupNode]) -> None:
        self.source = source
        self.nodes = nodes

    def __iter__(self) -> Iterator[MarkupNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, handle: int) -> MarkupNode:
        return self.nodes[handle]

    def find_all(self, tag: str) -> List[MarkupNode]:
        """All elements with the given tag name, in document order."""
        tag = tag.lower()
        return [node for node in self.nodes if node.tag == tag]

    def inner_source(self, node: MarkupNode) -> str:
        """The untouched source between a node's start and end tags."""
        if node.inner is None:
            return ""
        start, end = node.inner
        return self.source[start:end]

    @classmethod
    def parse(cls, source: str, path: str = "<string>") -> "MarkupTree":
        """
        Build a tree for ``source``.

        Args:
            source: Template text
            path: Used in error messages only

        Returns:
            The parsed tree

        Raises:
            MarkupParseError: If the parser rejects the markup
        """
        try:
            soup = BeautifulSoup(source, "html.parser", multi_valued_attributes=None)
        except (ParserRejectedMarkup, AssertionError, ValueError) as e:
            raise MarkupParseError(path, str(e)) from e

        tags: List[Tag] = soup.find_all(True)
        handles = {id(tag): index for index, tag in enumerate(tags)}
        line_starts = _line_starts(source)

        nodes: List[MarkupNode] = []
        cursor = 0
        for index, tag in enumerate(tags):
            start = _locate_start(source, tag, line_starts, cursor)
            if start is None:
                raise MarkupParseError(path, f"cannot locate <{tag.name}> in source")
            cursor = start + 1

            start_tag_end = _tag_end(source, start)
            raw_start_tag = source[start:start_tag_end]

            inner: Optional[Span] = None
            self_closing = raw_start_tag.endswith("/>")
            if tag.name not in VOID_ELEMENTS and not self_closing:
                close = _find_close(source, tag.name, start_tag_end)
                if close is not None:
                    inner = (start_tag_end, close)
                else:
                    logger.debug(f"No closing tag for <{tag.name}> at offset {start} in {path}")

            nodes.append(
                MarkupNode(
                    handle=index,
                    tag=tag.name,
                    attrs={name: value or "" for name, value in tag.attrs.items()},
                    text=tag.get_text(),
                    line=tag.sourceline,
                    children=[handles[id(child)] for child in tag.find_all(True, recursive=False)],
                    descendants=[handles[id(child)] for child in tag.find_all(True)],
                    start_tag=(start, start_tag_end),
                    inner=inner,
                    attr_spans=_attribute_spans(raw_start_tag, start, tag.name),
                )
            )

        return cls(source, nodes)


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for index, ch in enumerate(source):
        if ch == "\n":
            starts.append(index + 1)
    return starts


def _locate_start(source: str, tag: Tag, line_starts: List[int], cursor: int) -> Optional[int]:
    """Offset of the ``<`` that opens ``tag``."""
    if tag.sourceline is not None and tag.sourcepos is not None:
        line = tag.sourceline - 1
        if 0 <= line < len(line_starts):
            offset = line_starts[line] + tag.sourcepos
            if source.startswith("<", offset) and source[offset + 1 : offset + 1 + len(tag.name)].lower() == tag.name:
                return offset

    # Fall back to the next "<name" after the previous element.
    match = re.compile(rf"<{re.escape(tag.name)}(?=[\s/>])", re.I).search(source, cursor)
    return match.start() if match else None


def _tag_end(source: str, start: int) -> int:
    """Offset just past the ``>`` closing the tag that opens at ``start``."""
    quote = None
    for index in range(start + 1, len(source)):
        ch = source[index]
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == ">":
            return index + 1
    return len(source)


def _find_close(source: str, name: str, pos: int) -> Optional[int]:
    """Offset of the ``</name>`` matching an element whose content starts at ``pos``."""
    depth = 1
    while True:
        match = _TAG_TOKEN_RE.search(source, pos)
        if match is None:
            return None
        if match.group(2) is None:
            pos = match.end()
            continue

        end = _tag_end(source, match.start())
        if match.group(2).lower() == name:
            if match.group(1):
                depth -= 1
                if depth == 0:
                    return match.start()
            elif not source[match.start() : end].endswith("/>"):
                depth += 1
        pos = end


def _attribute_spans(raw_start_tag: str, offset: int, name: str) -> Dict[str, Span]:
    """Absolute spans of every attribute value written in a start tag."""
    spans: Dict[str, Span] = {}
    body_start = 1 + len(name)
    for match in _ATTRIBUTE_RE.finditer(raw_start_tag, body_start):
        attr = match.group(1).lower()
        for group in (2, 3, 4):
            if match.group(group) is not None:
                spans.setdefault(attr, (offset + match.start(group), offset + match.end(group)))
                break
    return spans

"""
Span-based source rewriting.

Extractors never re-serialise a parsed document. They record which character
ranges of the original text to replace and splice the replacements in, so
everything outside those ranges stays byte-identical.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class Substitution:
    """Replace ``text[start:end]`` with ``replacement``."""

    start: int
    end: int
    replacement: str


def select_outermost(substitutions: Iterable[Substitution]) -> List[Substitution]:
    """
    Drop substitutions nested inside another one.

    An attribute rewrite inside an inner-markup fragment that is itself being
    replaced would otherwise be spliced into text that no longer exists.
    Partially overlapping ranges keep the one that starts first.
    """
    ordered = sorted(substitutions, key=lambda s: (s.start, -s.end))
    selected: List[Substitution] = []
    for sub in ordered:
        if selected and sub.start < selected[-1].end:
            continue
        selected.append(sub)
    return selected


def apply_substitutions(text: str, substitutions: Iterable[Substitution]) -> Tuple[str, int]:
    """
    Apply substitutions to ``text``.

    Returns:
        The rewritten text and the number of substitutions applied
    """
    selected = select_outermost(substitutions)
    result = text
    for sub in reversed(selected):
        result = result[: sub.start] + sub.replacement + result[sub.end :]
    return result, len(selected)

"""
Translation key generation.

Keys look like ``<prefix>.[<component>.]<slug>_<counter>``. The counter lives
on the generator, one generator per session, so keys never repeat within a
run even for identical text.
"""

import re
from pathlib import Path
from typing import Optional, Union

DEFAULT_MAX_SLUG_LENGTH = 30
CONTEXT_SLUG_REDUCTION = 5
MAX_COMPONENT_CONTEXT_LENGTH = 15
FALLBACK_COMPONENT_CONTEXT = "comp"
FALLBACK_SLUG = "text"

STRUCTURAL_SUFFIX_RE = re.compile(
    r"\.(component|service|directive|pipe|guard|resolver|module|spec|test)$", re.I
)
GENERIC_PREFIX_RE = re.compile(r"^(app-|ng-)", re.I)

_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD_CHARS = re.compile(r"[^a-zA-Z0-9]")


def slugify(text: str, max_length: int = DEFAULT_MAX_SLUG_LENGTH) -> str:
    """
    Render text as a key segment.

    "Hello, World!" -> "hello_world". Characters outside ``[a-zA-Z0-9]`` and
    whitespace are dropped, whitespace runs become one underscore, and the
    result is cut to ``max_length``.
    """
    cleaned = _NON_SLUG_CHARS.sub("", text.strip().lower())
    slug = _WHITESPACE.sub("_", cleaned.strip())[:max_length]
    return slug or FALLBACK_SLUG


def derive_component_context(file_path: Union[str, Path]) -> str:
    """
    Derive a short namespace token from a file name.

    Examples:
        user-profile.component.html -> userProfile
        app-header.component.ts -> header
        user-account-settings-form-management.component.ts -> uasfm
    """
    name = Path(file_path).name
    stem = name.rsplit(".", 1)[0] if "." in name else name

    base = STRUCTURAL_SUFFIX_RE.sub("", stem)
    base = GENERIC_PREFIX_RE.sub("", base)

    words = [_NON_WORD_CHARS.sub("", word) for word in base.split("-")]
    words = [word for word in words if word]
    if not words:
        return FALLBACK_COMPONENT_CONTEXT

    camel_case = words[0] + "".join(word[0].upper() + word[1:] for word in words[1:])

    if len(camel_case) > MAX_COMPONENT_CONTEXT_LENGTH:
        abbreviated = "".join(word[0] for word in words).lower()
        return abbreviated if len(abbreviated) >= 2 else camel_case[:10]

    return camel_case


class KeyGenerator:
    """Issues unique keys for one extraction session."""

    def __init__(
        self,
        prefix: str,
        max_slug_length: int = DEFAULT_MAX_SLUG_LENGTH,
        start: int = 1,
    ) -> None:
        """
        Initialize the generator.

        Args:
            prefix: Root namespace, e.g. ``app``
            max_slug_length: Slug length when no component segment is added
            start: First counter value
        """
        self.prefix = prefix
        self.max_slug_length = max_slug_length
        self.start = start
        self.counter = start

    def generate(self, text: str, component_context: Optional[str] = None) -> str:
        """
        Build the next key for ``text``.

        Args:
            text: Display text the key stands for
            component_context: Optional namespace token for the current file

        Returns:
            A key that has not been issued before by this generator
        """
        max_length = self.max_slug_length
        if component_context:
            max_length -= CONTEXT_SLUG_REDUCTION

        parts = [self.prefix]
        if component_context:
            parts.append(component_context)
        parts.append(f"{slugify(text, max_length)}_{self.counter}")

        self.counter += 1
        return ".".join(parts)

    @property
    def issued(self) -> int:
        """Number of keys handed out so far."""
        return self.counter - self.start

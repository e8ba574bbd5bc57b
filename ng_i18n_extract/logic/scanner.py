"""
Tokenizer-level scanner for TypeScript sources.

One forward pass finds every quoted literal (``'...'``, ``"..."`` and
template literals) outside comments and regular-expression literals. It also
produces:

* a masked copy of the source, same length, with comment and literal bodies
  blanked to spaces (newlines kept), so structural regexes never match text
  inside strings or comments;
* for every literal, the stack of brackets still open at its first character,
  from which the context builder reads the enclosing scopes.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ng_i18n_extract.models import StringLiteral

# (bracket character, offset) pairs, outermost first
BracketStack = Tuple[Tuple[str, int], ...]

QUOTES = "'\"`"
OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}

# A "/" in code position starts a regex literal after these characters.
_REGEX_PRECEDERS = set("(,=:[!&|?{};")
_REGEX_KEYWORDS_RE = re.compile(r"(?:^|[^\w$])(?:return|typeof|case|do|else|in|of|void|yield|await)$")

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "b": "\b", "f": "\f", "v": "\v"}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|\r\n|[\s\S])")


@dataclass
class ScannedSource:
    """Result of scanning one TypeScript file."""

    source: str
    masked: str
    literals: List[StringLiteral] = field(default_factory=list)
    enclosing: Dict[int, BracketStack] = field(default_factory=dict)

    def brackets_at(self, literal: StringLiteral) -> BracketStack:
        """Brackets open at the literal's opening quote, outermost first."""
        return self.enclosing.get(literal.start, ())


def unescape(value: str) -> str:
    """Resolve backslash escapes in a literal body ("Don\\'t" -> "Don't")."""

    def replace(match: "re.Match[str]") -> str:
        escape = match.group(1)
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape[0] in "ux" and len(escape) > 1:
            return chr(int(escape[1:], 16))
        if escape in ("\n", "\r\n"):
            return ""
        return _ESCAPES.get(escape, escape)

    return _ESCAPE_RE.sub(replace, value)


def scan_source(source: str) -> ScannedSource:
    """
    Scan ``source`` for string literals.

    Returns:
        Literals in document order, the masked source and bracket stacks
    """
    masked = list(source)
    literals: List[StringLiteral] = []
    enclosing: Dict[int, BracketStack] = {}
    stack: List[Tuple[str, int]] = []

    def blank(start: int, end: int) -> None:
        for index in range(start, end):
            if masked[index] != "\n":
                masked[index] = " "

    length = len(source)
    i = 0
    while i < length:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < length else ""

        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            end = length if end == -1 else end
            blank(i, end)
            i = end
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            end = length if end == -1 else end + 2
            blank(i, end)
            i = end
        elif ch == "/" and _starts_regex(source, i):
            end = _skip_regex(source, i)
            if end is None:
                i += 1
                continue
            blank(i + 1, end)
            i = end + 1
        elif ch in QUOTES:
            end = _skip_template(source, i) if ch == "`" else _skip_string(source, i)
            if end is None:
                # Unterminated: a stray quote, not a literal.
                i += 1
                continue
            enclosing[i] = tuple(stack)
            literals.append(StringLiteral(start=i, end=end, quote=ch, value=source[i + 1 : end - 1]))
            blank(i + 1, end - 1)
            i = end
        else:
            if ch in OPENERS:
                stack.append((ch, i))
            elif ch in CLOSERS and stack and stack[-1][0] == CLOSERS[ch]:
                stack.pop()
            i += 1

    return ScannedSource(source=source, masked="".join(masked), literals=literals, enclosing=enclosing)


def _skip_string(source: str, start: int):
    """Offset past the closing quote of a '...' or "..." literal, or None."""
    quote = source[start]
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            return None
        i += 1
    return None


def _skip_template(source: str, start: int):
    """Offset past the closing backtick, treating ``${...}`` as opaque."""
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            return i + 1
        if ch == "$" and source.startswith("{", i + 1):
            depth = 1
            i += 2
            while i < len(source) and depth:
                if source[i] == "{":
                    depth += 1
                elif source[i] == "}":
                    depth -= 1
                elif source[i] in "'\"`":
                    end = _skip_template(source, i) if source[i] == "`" else _skip_string(source, i)
                    if end is not None:
                        i = end
                        continue
                i += 1
            continue
        i += 1
    return None


def _starts_regex(source: str, index: int) -> bool:
    before = source[max(0, index - 64) : index].rstrip()
    if not before:
        return True
    if before[-1] in _REGEX_PRECEDERS:
        return True
    return _REGEX_KEYWORDS_RE.search(before[-12:]) is not None


def _skip_regex(source: str, start: int):
    """Offset of the closing slash of a regex literal, or None if unterminated."""
    i = start + 1
    in_class = False
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            return None
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "/":
            return i
        i += 1
    return None

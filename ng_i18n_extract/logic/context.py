"""
Classification context for string literals in TypeScript sources.

Everything here reads the masked source produced by the scanner, so keywords,
brackets and punctuation inside other strings or comments never count. The
enclosing scopes come from the scanner's bracket stack instead of a backward
search for method signatures.
"""

import re
from typing import Optional

from ng_i18n_extract.logic.scanner import BracketStack, ScannedSource
from ng_i18n_extract.models import ClassificationContext, StringLiteral

CONTEXT_WINDOW = 200

_CALLEE_RE = re.compile(r"(@?[\w$][\w$.]*)\s*(?:<[^<>()]*>)?\s*(?:\?\.)?\s*$")
_CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch", "return", "typeof", "with"})

_IMPORT_LINE_RE = re.compile(r"^\s*(?:import\b|export\b[^=]*\bfrom\s*$)")
_FROM_RE = re.compile(r"\bfrom\s*$")
_THROW_NEW_RE = re.compile(r"\bthrow\s+new\s+[\w$.]+\s*$")
_THROW_RE = re.compile(r"\bthrow\s+$")
_PROPERTY_VALUE_RE = re.compile(r"[\w$'\"\]]\s*:\s*$")
_FUNCTION_BODY_RE = re.compile(r"(?:\)|=>)\s*(?::\s*[^{};=()]+)?$")
_CLASS_HEAD_RE = re.compile(r"\bclass(?:\s+[\w$]+)?(?:\s*<[^{]*>)?(?:\s+(?:extends|implements)\s+[^{;]+)?\s*$")
_FIELD_INITIALIZER_RE = re.compile(
    r"^\s*(?:@[\w$]+\([^)]*\)\s*)?"
    r"(?:(?:public|private|protected|readonly|static|override|declare)\s+)*"
    r"[\w$]+[?!]?\s*(?::\s*(?P<annotation>[^=;]+?))?\s*=\s*$"
)
_MEMBER_ANNOTATION_RE = re.compile(
    r"^\s*(?:@[\w$]+\([^)]*\)\s*)?"
    r"(?:(?:public|private|protected|readonly|static|override|declare|abstract)\s+)*"
    r"[\w$]+[?!]?\s*:[^=]*$"
)
_TYPE_BODY_RE = re.compile(
    r"(?:\binterface\s+[\w$]+(?:\s*<[^{]*>)?(?:\s+extends\s+[^{;]+)?"
    r"|\btype\s+[\w$]+(?:\s*<[^=]*>)?\s*=)\s*$"
)
_TYPE_ALIAS_RE = re.compile(r"^\s*(?:export\s+)?(?:declare\s+)?type\s+[\w$]+\b")
_TYPE_ARGUMENTS_RE = re.compile(r"[\w$]\s*<[\w$\s,|&'\"`.\[\]]*$")
_UNION_BEFORE_RE = re.compile(r"(?<![|&])[|&]\s*$")
_UNION_AFTER_RE = re.compile(r"^\s*[|&](?![|&=])")


def callee_before(masked: str, paren: int) -> Optional[str]:
    """Name written directly before the ``(`` at ``paren``, if any."""
    match = _CALLEE_RE.search(masked[max(0, paren - CONTEXT_WINDOW) : paren])
    return match.group(1) if match else None


def is_function_body(masked: str, brace: int) -> bool:
    """Whether the ``{`` at ``brace`` opens a method, function or arrow body."""
    return _FUNCTION_BODY_RE.search(masked[max(0, brace - CONTEXT_WINDOW) : brace].rstrip()) is not None


def is_class_body(masked: str, brace: int) -> bool:
    return _CLASS_HEAD_RE.search(masked[max(0, brace - CONTEXT_WINDOW) : brace].rstrip()) is not None


def is_type_body(masked: str, brace: int) -> bool:
    """Whether the ``{`` at ``brace`` opens an interface or an object type."""
    return _TYPE_BODY_RE.search(masked[max(0, brace - CONTEXT_WINDOW) : brace].rstrip()) is not None


def innermost_brace(brackets: BracketStack) -> Optional[int]:
    for char, offset in reversed(brackets):
        if char == "{":
            return offset
    return None


def enclosing_class(scanned: ScannedSource, literal: StringLiteral) -> Optional[int]:
    """Offset of the ``{`` of the nearest class body around ``literal``."""
    for char, offset in reversed(scanned.brackets_at(literal)):
        if char == "{" and is_class_body(scanned.masked, offset):
            return offset
    return None


def is_type_position(masked: str, literal: StringLiteral, brackets: BracketStack) -> bool:
    """
    Whether ``literal`` is a string literal type rather than a value.

    Covers member annotations (``mode: 'edit' | 'view' = ...``), union and
    intersection members, type aliases, generic arguments and anything inside
    an interface or object type.
    """
    line_prefix = _line_prefix(masked, literal.start)
    innermost = brackets[-1] if brackets else None

    if innermost is not None and innermost[0] == "{" and is_class_body(masked, innermost[1]):
        if _MEMBER_ANNOTATION_RE.match(line_prefix):
            return True
    if any(char == "{" and is_type_body(masked, offset) for char, offset in brackets):
        return True
    if _TYPE_ALIAS_RE.match(line_prefix) or _TYPE_ARGUMENTS_RE.search(line_prefix):
        return True

    before = masked[max(0, literal.start - CONTEXT_WINDOW) : literal.start]
    after = masked[literal.end : literal.end + CONTEXT_WINDOW]
    return bool(_UNION_BEFORE_RE.search(before) or _UNION_AFTER_RE.match(after))


def build_context(scanned: ScannedSource, literal: StringLiteral) -> ClassificationContext:
    """Describe where ``literal`` sits in its file."""
    masked = scanned.masked
    start = literal.start
    brackets = scanned.brackets_at(literal)
    before_masked = masked[max(0, start - CONTEXT_WINDOW) : start]
    line_prefix = _line_prefix(masked, start)

    parens = [(offset, callee_before(masked, offset)) for char, offset in brackets if char == "("]
    innermost = brackets[-1] if brackets else None
    innermost_callee = parens[-1][1] if innermost is not None and innermost[0] == "(" else None

    is_import = bool(_IMPORT_LINE_RE.match(line_prefix) or _FROM_RE.search(before_masked))
    if innermost_callee in ("require", "import"):
        is_import = True

    is_throw = bool(_THROW_RE.search(before_masked))
    if innermost is not None and innermost[0] == "(":
        is_throw = is_throw or bool(_THROW_NEW_RE.search(masked[max(0, innermost[1] - CONTEXT_WINDOW) : innermost[1]]))

    brace = innermost_brace(brackets)
    is_class_property = brace is not None and is_class_body(masked, brace)
    is_in_method = any(char == "{" and is_function_body(masked, offset) for char, offset in brackets)

    # A ``name:`` directly in a class body is an annotation, not a property.
    is_object_property = (
        innermost is not None
        and innermost[0] == "{"
        and not is_class_body(masked, innermost[1])
        and bool(_PROPERTY_VALUE_RE.search(before_masked))
    )
    is_array_element = innermost is not None and innermost[0] == "["
    is_call_argument = innermost_callee is not None and innermost_callee not in _CONTROL_KEYWORDS

    is_nested = is_object_property or is_array_element or is_call_argument
    initializer = None
    if is_class_property and not is_in_method and not is_nested:
        initializer = _FIELD_INITIALIZER_RE.match(line_prefix)
    annotation = initializer.group("annotation") if initializer else None

    return ClassificationContext(
        before=scanned.source[max(0, start - CONTEXT_WINDOW) : start],
        line=_line(scanned.source, start),
        is_import=is_import,
        is_decorator=any(callee is not None and callee.startswith("@") for _, callee in parens),
        is_throw=is_throw,
        is_console=any(callee is not None and callee.startswith("console.") for _, callee in parens),
        is_class_property=is_class_property,
        is_in_method=is_in_method,
        is_object_property=is_object_property,
        is_array_element=is_array_element,
        is_call_argument=is_call_argument,
        is_type_position=is_type_position(masked, literal, brackets),
        is_field_initializer=initializer is not None,
        field_annotation=annotation.strip() if annotation else None,
    )


def _line_prefix(text: str, offset: int) -> str:
    return text[text.rfind("\n", 0, offset) + 1 : offset]


def _line(text: str, offset: int) -> str:
    end = text.find("\n", offset)
    return text[text.rfind("\n", 0, offset) + 1 : len(text) if end == -1 else end].strip()

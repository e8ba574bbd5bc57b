"""
Display-text classifier.

Decides whether a string is text meant for an end user or an incidental piece
of code (identifier, path, URL, selector, constant...). The decision is a
fixed sequence of checks; the first one that applies wins:

1. empty, one character, or no letters at all -> reject
2. already a translation key or an interpolation -> reject
3. surrounding-code context (imports, decorators, console calls, thrown
   errors, class-level fields)
4. the code-shape rule battery -> reject on first match
5. accept phrases, or single tokens of five characters or more
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ng_i18n_extract.classifier.rules import (
    CODE_SHAPE_RULES,
    CONVERSATIONAL_RULE,
    MULTI_WORD_RULE,
    NOISE_RULE,
    PLACEHOLDER_RULES,
    TECHNICAL_ERROR_RULES,
    PatternRule,
    first_match,
)
from ng_i18n_extract.models import ClassificationContext

MIN_LENGTH = 2
MIN_SINGLE_TOKEN_LENGTH = 5
MIN_ERROR_MESSAGE_LENGTH = 10


@dataclass(frozen=True)
class Verdict:
    """Classifier outcome together with the check that produced it."""

    accepted: bool
    reason: str

    def __bool__(self) -> bool:
        return self.accepted


class TextClassifier:
    """Heuristic classifier for user-facing display text."""

    def __init__(
        self,
        code_rules: Sequence[PatternRule] = CODE_SHAPE_RULES,
        placeholder_rules: Sequence[PatternRule] = PLACEHOLDER_RULES,
        technical_error_rules: Sequence[PatternRule] = TECHNICAL_ERROR_RULES,
    ) -> None:
        """
        Initialize the classifier.

        Args:
            code_rules: Ordered rules for strings that look like code
            placeholder_rules: Rules for already-translated content
            technical_error_rules: Rules for developer-facing error messages
        """
        self.code_rules = tuple(code_rules)
        self.placeholder_rules = tuple(placeholder_rules)
        self.technical_error_rules = tuple(technical_error_rules)

    def is_excluded(self, text: str) -> bool:
        """True for strings too short or too letterless to ever be display text."""
        trimmed = text.strip()
        return len(trimmed) < MIN_LENGTH or NOISE_RULE.matches(trimmed)

    def is_display_text(self, text: str, context: Optional[ClassificationContext] = None) -> bool:
        return self.explain(text, context).accepted

    def explain(self, text: str, context: Optional[ClassificationContext] = None) -> Verdict:
        """
        Classify ``text`` and report which check decided.

        Args:
            text: Candidate string
            context: Where the string was found in a logic file, if known

        Returns:
            Verdict with the accepting or rejecting reason
        """
        trimmed = text.strip()

        if not trimmed:
            return Verdict(False, "empty")
        if len(trimmed) < MIN_LENGTH:
            return Verdict(False, "too_short")
        if NOISE_RULE.matches(trimmed):
            return Verdict(False, NOISE_RULE.name)

        placeholder = first_match(self.placeholder_rules, trimmed)
        if placeholder is not None:
            return Verdict(False, placeholder.name)

        if context is not None:
            verdict = self._check_context(trimmed, context)
            if verdict is not None:
                return verdict

        code_shape = first_match(self.code_rules, trimmed)
        if code_shape is not None:
            return Verdict(False, code_shape.name)

        if MULTI_WORD_RULE.matches(trimmed):
            return Verdict(True, "phrase")
        if len(trimmed) >= MIN_SINGLE_TOKEN_LENGTH:
            return Verdict(True, "word")
        return Verdict(False, "short_token")

    def _check_context(self, trimmed: str, context: ClassificationContext) -> Optional[Verdict]:
        if context.is_type_position:
            return Verdict(False, "type_annotation")
        if context.is_import:
            return Verdict(False, "import")
        if context.is_decorator:
            return Verdict(False, "decorator")
        if context.is_console:
            return Verdict(False, "console")
        if context.is_throw:
            if self.is_user_facing_error_message(trimmed):
                return Verdict(True, "user_facing_error")
            return Verdict(False, "technical_error")
        if context.is_class_level and not self.looks_conversational(trimmed):
            return Verdict(False, "class_constant")
        return None

    def is_user_facing_error_message(self, text: str) -> bool:
        """
        Tell a message meant for users from a developer-facing error.

        "Your session has expired" is user-facing; "TypeError: x is undefined",
        "failed to connect()" and "INVALID_CREDENTIALS" are not.
        """
        trimmed = text.strip()
        if first_match(self.technical_error_rules, trimmed) is not None:
            return False
        lowercase = sum(1 for ch in trimmed if ch.islower())
        return len(trimmed) > MIN_ERROR_MESSAGE_LENGTH and lowercase >= 2

    def looks_conversational(self, text: str) -> bool:
        """Whether a class-level string reads like something said to a user."""
        trimmed = text.strip()
        if len(trimmed) <= MIN_SINGLE_TOKEN_LENGTH:
            return False
        if first_match(self.code_rules, trimmed) is not None:
            return False
        return MULTI_WORD_RULE.matches(trimmed) or CONVERSATIONAL_RULE.matches(trimmed)


default_classifier = TextClassifier()


def is_display_text(text: str, context: Optional[ClassificationContext] = None) -> bool:
    """Classify ``text`` with the default rule set."""
    return default_classifier.is_display_text(text, context)


def is_user_facing_error_message(text: str) -> bool:
    return default_classifier.is_user_facing_error_message(text)

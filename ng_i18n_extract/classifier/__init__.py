"""
Display-text classification.
"""

from ng_i18n_extract.classifier.text_classifier import (
    TextClassifier,
    Verdict,
    default_classifier,
    is_display_text,
    is_user_facing_error_message,
)

__all__ = [
    "TextClassifier",
    "Verdict",
    "default_classifier",
    "is_display_text",
    "is_user_facing_error_message",
]

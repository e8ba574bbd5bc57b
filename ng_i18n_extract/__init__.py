"""
Angular i18n text extractor.

Finds user-facing display text in Angular templates and component classes,
registers each string under a generated translation key, and can rewrite the
sources to look the keys up at runtime.
"""

__version__ = "0.1.0"

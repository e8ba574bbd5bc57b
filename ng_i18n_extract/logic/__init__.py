"""
Component-class (TypeScript) extraction.

This package scans TypeScript sources for string literals, works out where
each literal sits in the code, and rewrites accepted literals into calls on
the shared TranslateService.
"""

from ng_i18n_extract.logic.context import build_context
from ng_i18n_extract.logic.extractor import LogicExtractor
from ng_i18n_extract.logic.scanner import ScannedSource, scan_source

__all__ = ["LogicExtractor", "ScannedSource", "build_context", "scan_source"]

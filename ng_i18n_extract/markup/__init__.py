"""
Template (HTML) extraction.

This package loads Angular templates into a node tree with exact source spans
and extracts text nodes, mixed inline markup and display attributes.
"""

from ng_i18n_extract.markup.extractor import MarkupExtractor
from ng_i18n_extract.markup.tree import MarkupNode, MarkupTree

__all__ = ["MarkupExtractor", "MarkupNode", "MarkupTree"]

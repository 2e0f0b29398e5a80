"""Font Discovery Module
=====================

Locates ``@font-face`` sources in a page, its linked stylesheets and their
``@import`` chains.
"""

from .css import parse_css, parse_declarations, pick_best_source
from .extractor import FontExtractor, extract_fonts_from_url
from .urls import normalize_target, resolve

__all__ = [
    "FontExtractor",
    "extract_fonts_from_url",
    "normalize_target",
    "parse_css",
    "parse_declarations",
    "pick_best_source",
    "resolve",
]

"""Screenplay readers for Fountain, Final Draft, OSF and PDF documents."""

from __future__ import annotations

from .containers import unpack
from .fdx_parser import FdxParser
from .fountain_parser import FountainParser, FountainState
from .markup import parse_markup
from .osf_parser import OsfParser
from .pdf_extractor import PdfContentExtractor
from .pdf_layout import (
    GlyphFragment,
    PageContent,
    PdfLayoutClassifier,
    PdfLayoutConfig,
    StrokePath,
)

__all__ = [
    "FdxParser",
    "FountainParser",
    "FountainState",
    "GlyphFragment",
    "OsfParser",
    "PageContent",
    "PdfContentExtractor",
    "PdfLayoutClassifier",
    "PdfLayoutConfig",
    "StrokePath",
    "parse_markup",
    "unpack",
]

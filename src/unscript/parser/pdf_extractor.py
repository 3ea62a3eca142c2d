"""Positioned text and stroke extraction from PDF files using pdfplumber."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from io import BytesIO
from typing import Any

import pdfplumber

from unscript.config import get_logger
from unscript.exceptions import MalformedContainerError
from unscript.parser.pdf_layout import GlyphFragment, PageContent, StrokePath

logger = get_logger(__name__)

# Strokes thicker than this are boxes, not underlines
MAX_STROKE_THICKNESS = 1.0


def _baseline(char: dict[str, Any]) -> float:
    """Baseline of a glyph measured up from the page bottom."""
    matrix = char.get("matrix")
    if matrix and len(matrix) == 6:
        return round(float(matrix[5]), 2)
    return round(float(char["y0"]), 2)


def build_fragments(chars: Iterable[dict[str, Any]]) -> list[GlyphFragment]:
    """Group characters in drawing order into same-font, same-baseline runs.

    A horizontal gap wider than the previous glyph becomes a single space.

    Args:
        chars: pdfplumber character dictionaries in stream order

    Returns:
        Glyph fragments in stream order
    """
    fragments: list[GlyphFragment] = []
    text: list[str] = []
    head: dict[str, Any] | None = None
    previous: dict[str, Any] | None = None

    def flush() -> None:
        if head is not None and text:
            fragments.append(
                GlyphFragment(
                    text="".join(text),
                    font_name=head.get("fontname", ""),
                    x=float(head["x0"]),
                    y=_baseline(head),
                    height=float(head.get("size", head.get("height", 0.0))),
                )
            )

    for char in chars:
        if (
            head is None
            or previous is None
            or char.get("fontname", "") != head.get("fontname", "")
            or _baseline(char) != _baseline(head)
        ):
            flush()
            head = char
            text = [char["text"]]
        else:
            advance = float(previous["x1"]) - float(previous["x0"])
            if float(char["x0"]) - float(previous["x1"]) > advance:
                text.append(" ")
            text.append(char["text"])
        previous = char

    flush()
    return fragments


def build_paths(
    lines: Iterable[dict[str, Any]], rects: Iterable[dict[str, Any]]
) -> list[StrokePath]:
    """Horizontal strokes from drawn lines and hairline rectangles."""
    paths = [
        StrokePath(x0=float(line["x0"]), y=float(line["top"]), x1=float(line["x1"]))
        for line in lines
    ]
    paths.extend(
        StrokePath(x0=float(rect["x0"]), y=float(rect["top"]), x1=float(rect["x1"]))
        for rect in rects
        if float(rect["bottom"]) - float(rect["top"]) <= MAX_STROKE_THICKNESS
    )
    return paths


class PdfContentExtractor:
    """Read every page of a PDF into :class:`PageContent` records."""

    def __init__(self, pdf_open: Callable[..., Any] = pdfplumber.open) -> None:
        """Initialize the extractor.

        Args:
            pdf_open: Opener returning a pdfplumber-like document context
        """
        self.pdf_open = pdf_open

    def extract(self, data: bytes, source: str = "PDF document") -> list[PageContent]:
        """Extract glyph fragments and stroke paths from all pages.

        Args:
            data: Raw PDF bytes
            source: Name used in error messages

        Returns:
            One PageContent per page, in page order

        Raises:
            MalformedContainerError: If the PDF cannot be opened or read
        """
        pages: list[PageContent] = []
        try:
            with self.pdf_open(BytesIO(data)) as pdf:
                for page in pdf.pages:
                    pages.append(
                        PageContent(
                            fragments=build_fragments(page.chars),
                            paths=build_paths(page.lines, page.rects),
                            width=float(page.width),
                            height=float(page.height),
                        )
                    )
        except Exception as e:
            raise MalformedContainerError(
                message=f"Failed to read PDF: {source}",
                hint="Check that the file is a valid, unencrypted PDF.",
                details={"source": source, "error": str(e)},
            ) from e

        logger.debug(
            "Extracted PDF content",
            source=source,
            pages=len(pages),
            fragments=sum(len(page.fragments) for page in pages),
        )
        return pages

"""Helpers shared by the XML screenplay adapters."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable

from unscript.exceptions import MalformedContainerError
from unscript.models import ElementType
from unscript.parser.patterns import AUTHOR_MARKER

# Paragraph type names used by both Final Draft and Open Screenplay Format.
# "General" is only meaningful as the wrapper of a dual dialogue block.
PARAGRAPH_TYPES: dict[str, ElementType] = {
    "Action": ElementType.ACTION,
    "Character": ElementType.CHARACTER,
    "Dialogue": ElementType.DIALOGUE,
    "Parenthetical": ElementType.PARENTHETICAL,
    "Scene Heading": ElementType.SCENE_HEADING,
    "Transition": ElementType.TRANSITION,
}
GENERAL = "General"

UPPERCASE_TYPES = frozenset(
    {ElementType.CHARACTER, ElementType.SCENE_HEADING, ElementType.TRANSITION}
)


def paragraph_type(name: str | None) -> ElementType:
    """Element type for a paragraph type name; unknown names read as action."""
    return PARAGRAPH_TYPES.get(name or "", ElementType.ACTION)


def run_text(text: str | None, element_type: ElementType) -> str:
    """Run text, upper-cased for types printed in capitals."""
    text = text or ""
    return text.upper() if element_type in UPPERCASE_TYPES else text


def parse_xml(data: bytes, source: str) -> ET.Element:
    """Parse XML bytes into the document root.

    Raises:
        MalformedContainerError: If the bytes are not well-formed XML
    """
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedContainerError(
            message=f"Malformed XML in {source}",
            hint="The file may be truncated or not an XML screenplay.",
            details={"source": source, "error": str(e)},
        ) from e


def read_title_blocks(
    blocks: Iterable[tuple[str, str | None]], title_page: dict[str, str]
) -> None:
    """Fill title and author from title page paragraphs.

    The first non-empty paragraph is the title. A ``Title`` or ``Author``
    bookmark sets that field directly, and otherwise the paragraph after a
    "written by" line is the author.

    Args:
        blocks: (text, bookmark) pairs in document order
        title_page: Title page mapping updated in place
    """
    is_first = True
    is_author = False
    for text, bookmark in blocks:
        if not text:
            continue
        if is_first:
            title_page["title"] = text
            is_first = False
            continue
        if bookmark == "Title":
            title_page["title"] = text
            continue
        if bookmark == "Author":
            title_page["author"] = text
            continue
        if is_author:
            title_page["author"] = text
            is_author = False
            continue
        if AUTHOR_MARKER.search(text):
            is_author = True

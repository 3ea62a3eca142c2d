"""Open Screenplay Format (OSF) parser, also used for Fade In documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from unscript.config import UnscriptSettings, get_logger, get_settings
from unscript.exceptions import MalformedContainerError
from unscript.models import (
    Script,
    ScriptElement,
    Style,
    TextElement,
    default_title_page,
)
from unscript.parser.structured import (
    paragraph_type,
    parse_xml,
    read_title_blocks,
    run_text,
)

logger = get_logger(__name__)

FALSE_VALUES = frozenset({"0", "false", "no"})


def text_styles(node: ET.Element) -> frozenset[Style]:
    """Styles switched on by ``bold``, ``italic`` and ``underline`` attributes."""
    return frozenset(
        style
        for style in Style
        if style.value in node.attrib
        and node.attrib[style.value].strip().lower() not in FALSE_VALUES
    )


class OsfParser:
    """Map Open Screenplay Format XML onto a :class:`Script`."""

    def __init__(self, settings: UnscriptSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def parse(self, data: bytes, title: str | None = None) -> Script:
        """Parse OSF bytes.

        Args:
            data: Raw OSF document
            title: Fallback title, usually the file name stem

        Returns:
            Parsed Script

        Raises:
            MalformedContainerError: If the XML is malformed or has no
                ``paragraphs`` element
        """
        source = title or "OSF document"
        root = parse_xml(data, source)

        paragraphs = root.find(".//paragraphs")
        if paragraphs is None:
            raise MalformedContainerError(
                message=f"OSF document has no paragraphs element: {source}",
                details={"source": source, "expected_member": "paragraphs"},
            )

        title_page = default_title_page(title, self.settings.default_author)
        titlepage = root.find(".//titlepage")
        if titlepage is not None:
            read_title_blocks(
                (
                    (self._first_text(paragraph), paragraph.get("bookmark"))
                    for paragraph in titlepage.iter("para")
                ),
                title_page,
            )

        elements = [self.parse_paragraph(para) for para in paragraphs.iter("para")]
        logger.debug(
            "Parsed OSF document", title=title_page["title"], elements=len(elements)
        )
        return Script(title_page=title_page, elements=elements)

    def parse_file(self, file_path: Path) -> Script:
        return self.parse(file_path.read_bytes(), title=file_path.stem)

    @staticmethod
    def _first_text(paragraph: ET.Element) -> str:
        node = paragraph.find(".//text")
        return "".join(node.itertext()) if node is not None else ""

    @staticmethod
    def parse_paragraph(paragraph: ET.Element) -> ScriptElement:
        """Map one ``para`` element by its ``style/@basestyle``."""
        style = paragraph.find("style")
        basestyle = style.get("basestyle") if style is not None else None
        element_type = paragraph_type(basestyle)
        runs = [
            TextElement(
                run_text("".join(node.itertext()), element_type), text_styles(node)
            )
            for node in paragraph.iter("text")
        ]
        centered = style is not None and style.get("align") == "center"
        return ScriptElement.text(element_type, runs, centered)

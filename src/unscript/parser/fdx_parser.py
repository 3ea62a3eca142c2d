"""Final Draft (FDX) screenplay parser."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from unscript.config import UnscriptSettings, get_logger, get_settings
from unscript.exceptions import MalformedContainerError
from unscript.models import (
    ElementType,
    Script,
    ScriptElement,
    Style,
    TextElement,
    default_title_page,
)
from unscript.parser.structured import (
    GENERAL,
    PARAGRAPH_TYPES,
    paragraph_type,
    parse_xml,
    read_title_blocks,
    run_text,
)

logger = get_logger(__name__)


def _styles(attribute: str | None) -> frozenset[Style]:
    """Styles named in a ``Bold+Italic`` style attribute."""
    return Style.parse(attribute.split("+")) if attribute else frozenset()


class FdxParser:
    """Map Final Draft XML onto a :class:`Script`."""

    def __init__(self, settings: UnscriptSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def parse(self, data: bytes, title: str | None = None) -> Script:
        """Parse FDX bytes.

        Args:
            data: Raw FDX document
            title: Fallback title, usually the file name stem

        Returns:
            Parsed Script

        Raises:
            MalformedContainerError: If the XML is malformed or has no body
        """
        source = title or "FDX document"
        root = parse_xml(data, source)

        content = root.find("Content")
        if content is None:
            raise MalformedContainerError(
                message=f"FDX document has no Content element: {source}",
                hint="Only Final Draft script documents are supported.",
                details={"source": source, "expected_member": "Content"},
            )

        title_page = default_title_page(title, self.settings.default_author)
        read_title_blocks(
            (
                ("".join(node.text or "" for node in paragraph.iter("Text")), None)
                for paragraph in root.iterfind("TitlePage/Content/Paragraph")
            ),
            title_page,
        )

        elements = [
            self.parse_paragraph(paragraph)
            for paragraph in content
            if paragraph.tag == "Paragraph"
        ]
        styles = self.parse_element_settings(root)

        logger.debug(
            "Parsed FDX document",
            title=title_page["title"],
            elements=len(elements),
            styled_types=len(styles),
        )
        return Script(title_page=title_page, elements=elements, styles=styles)

    def parse_file(self, file_path: Path) -> Script:
        return self.parse(file_path.read_bytes(), title=file_path.stem)

    def parse_paragraph(
        self, paragraph: ET.Element, nested: bool = False
    ) -> ScriptElement:
        """Map one ``Paragraph`` element.

        A ``General`` paragraph wrapping ``DualDialogue`` becomes a dual
        element; its paragraphs go to the left column until the second
        character cue, then to the right.
        """
        type_name = paragraph.get("Type")
        dual = paragraph.find("DualDialogue")
        if type_name == GENERAL and dual is not None and not nested:
            left: list[ScriptElement] = []
            right: list[ScriptElement] = []
            characters = 0
            for child in dual.findall("Paragraph"):
                element = self.parse_paragraph(child, nested=True)
                if element.type is ElementType.CHARACTER:
                    characters += 1
                (left if characters < 2 else right).append(element)
            return ScriptElement.dual(left, right)

        element_type = paragraph_type(type_name)
        runs = [
            TextElement(run_text(node.text, element_type), _styles(node.get("Style")))
            for node in paragraph.iter("Text")
        ]
        centered = paragraph.get("Alignment") == "Center"
        return ScriptElement.text(element_type, runs, centered)

    @staticmethod
    def parse_element_settings(root: ET.Element) -> dict[ElementType, list[Style]]:
        """Per-type default styles from ``ElementSettings/FontSpec``."""
        styles: dict[ElementType, list[Style]] = {}
        for setting in root.iter("ElementSettings"):
            element_type = PARAGRAPH_TYPES.get(setting.get("Type") or "")
            font = setting.find("FontSpec")
            if element_type is None or font is None:
                continue
            names = (font.get("Style") or "").split("+")
            defaults = [style for style in Style if style in Style.parse(names)]
            if defaults:
                styles[element_type] = defaults
        return styles

"""Final Draft (FDX) writer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from unscript.models import Script, ScriptElement, Style, TextElement
from unscript.writers.base import ScriptWriter, register_writer
from unscript.writers.xml_tree import serialize, type_name

FDX_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>'
STYLE_NAMES: tuple[tuple[Style, str], ...] = (
    (Style.BOLD, "Bold"),
    (Style.ITALIC, "Italic"),
    (Style.UNDERLINE, "Underline"),
)


def style_attribute(styles: frozenset[Style] | list[Style]) -> str:
    """``Bold+Italic+Underline`` subset for a style set."""
    return "+".join(name for style, name in STYLE_NAMES if style in styles)


def _text_node(parent: ET.Element, run: TextElement) -> None:
    node = ET.SubElement(parent, "Text")
    style = style_attribute(run.styles)
    if style:
        node.set("Style", style)
    node.text = run.text


@register_writer
class FdxWriter(ScriptWriter):
    """Write scripts as Final Draft XML."""

    format_name = "fdx"
    extension = ".fdx"
    media_type = "application/xml"

    def write(self, script: Script) -> bytes:
        root = ET.Element(
            "FinalDraft", {"DocumentType": "Script", "Template": "No", "Version": "1"}
        )
        content = ET.SubElement(root, "Content")
        for element in script.elements:
            self.add_paragraph(content, element)

        self.add_title_page(root, script.title_page)

        for element_type, styles in script.styles.items():
            style = style_attribute(styles)
            if not style:
                continue
            setting = ET.SubElement(
                root, "ElementSettings", {"Type": type_name(element_type)}
            )
            ET.SubElement(setting, "FontSpec", {"Style": style})

        return serialize(root, FDX_DECLARATION)

    def add_paragraph(self, parent: ET.Element, element: ScriptElement) -> None:
        """Append a ``Paragraph``; dual dialogue nests both columns."""
        if element.is_dual:
            paragraph = ET.SubElement(parent, "Paragraph", {"Type": "General"})
            dual = ET.SubElement(paragraph, "DualDialogue")
            for child in (*element.left, *element.right):
                self.add_paragraph(dual, child)
            return

        paragraph = ET.SubElement(
            parent, "Paragraph", {"Type": type_name(element.type)}
        )
        if element.centered:
            paragraph.set("Alignment", "Center")
        for run in element.text_elements:
            _text_node(paragraph, run)

    @staticmethod
    def add_title_page(root: ET.Element, title_page: dict[str, str]) -> None:
        """Title, a by-line, the author, then any other title page values."""
        content = ET.SubElement(ET.SubElement(root, "TitlePage"), "Content")
        lines = [
            title_page.get("title", ""),
            "Written by",
            title_page.get("author", ""),
        ]
        lines.extend(
            value
            for key, value in title_page.items()
            if key not in ("title", "author")
        )
        for line in lines:
            paragraph = ET.SubElement(content, "Paragraph", {"Alignment": "Center"})
            ET.SubElement(paragraph, "Text").text = line

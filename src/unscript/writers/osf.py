"""Open Screenplay Format (OSF) writer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from unscript.models import Script, ScriptElement, Style
from unscript.writers.base import ScriptWriter, register_writer
from unscript.writers.xml_tree import serialize, type_name

OSF_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
OSF_DOCUMENT_TYPE = "Open Screenplay Format document"
OSF_VERSION = "40"
TITLE_BOOKMARKS = {"title": "Title", "author": "Author"}


@register_writer
class OsfWriter(ScriptWriter):
    """Write scripts as Open Screenplay Format XML.

    OSF has no dual dialogue, so both columns are written one after the
    other.
    """

    format_name = "osf"
    extension = ".xml"
    media_type = "text/xml"

    def write(self, script: Script) -> bytes:
        root = ET.Element(
            "document", {"type": OSF_DOCUMENT_TYPE, "version": OSF_VERSION}
        )

        titlepage = ET.SubElement(root, "titlepage")
        for key, value in script.title_page_items():
            bookmark = TITLE_BOOKMARKS.get(key)
            para = ET.SubElement(titlepage, "para")
            if bookmark:
                para.set("bookmark", bookmark)
            ET.SubElement(para, "text").text = value

        paragraphs = ET.SubElement(root, "paragraphs")
        for element in script.iter_elements():
            self.add_para(paragraphs, element)

        return serialize(root, OSF_DECLARATION)

    @staticmethod
    def add_para(parent: ET.Element, element: ScriptElement) -> None:
        para = ET.SubElement(parent, "para")
        style = ET.SubElement(para, "style", {"basestyle": type_name(element.type)})
        if element.centered:
            style.set("align", "center")
        for run in element.text_elements:
            node = ET.SubElement(para, "text")
            for name in Style:
                if name in run.styles:
                    node.set(name.value, "1")
            node.text = run.text

"""HTML writer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from unscript.models import ElementType, Script, ScriptElement, Style, TextElement
from unscript.writers.base import ScriptWriter, register_writer

CLASS_NAMES: dict[ElementType, str] = {
    ElementType.ACTION: "action",
    ElementType.CHARACTER: "character",
    ElementType.DIALOGUE: "dialogue",
    ElementType.PARENTHETICAL: "parenthetical",
    ElementType.SCENE_HEADING: "scene-heading",
    ElementType.TRANSITION: "transition",
    ElementType.DUAL_DIALOGUE: "dual-dialogue",
}

# Outermost first
STYLE_TAGS: tuple[tuple[Style, str], ...] = (
    (Style.BOLD, "strong"),
    (Style.ITALIC, "em"),
    (Style.UNDERLINE, "u"),
)

STYLESHEET = """
.title-page { margin: 2em 0 4em 0; text-align: center; }
.scene-heading { font-size: 1em; margin: 2em 0 1em 0; width: 100%; }
.action { margin: 1em 0; }
.character { margin: 1em 0 0 36%; width: 76%; }
.dialogue { margin: 0 0 0 12%; width: 76%; }
.parenthetical { margin: 0 0 0 24%; width: 48%; }
.transition { margin: 1em 0 -1em 0; text-align: right; }
.centered { text-align: center; }
.dual-dialogue { display: flex; width: 100%; gap: 1em; }
.dual-dialogue-column {
  width: 50%;
  display: flex;
  flex-direction: column;
  align-items: center;
}
.dual-dialogue .character { margin: 1em 0 0 0; }
.dual-dialogue .dialogue { margin: 0; width: 100%; }
.dual-dialogue .parenthetical { margin: 0 1.5em; }
"""


def append_text(parent: ET.Element, text: str) -> None:
    """Append character data after the last child of an element."""
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def append_run(parent: ET.Element, run: TextElement) -> None:
    """Append a run, nesting one tag per style."""
    target = parent
    for style, tag in STYLE_TAGS:
        if style in run.styles:
            target = ET.SubElement(target, tag)
    append_text(target, run.text)


def element_to_html(element: ScriptElement) -> ET.Element:
    """``h6`` for scene headings, ``p`` for other text, columns for dual."""
    if element.is_dual:
        block = ET.Element("div", {"class": CLASS_NAMES[element.type]})
        for column in (element.left, element.right):
            column_node = ET.SubElement(block, "div", {"class": "dual-dialogue-column"})
            column_node.extend(element_to_html(child) for child in column)
        return block

    tag = "h6" if element.type is ElementType.SCENE_HEADING else "p"
    classes = [CLASS_NAMES[element.type]]
    if element.centered:
        classes.append("centered")
    node = ET.Element(tag, {"class": " ".join(classes)})
    for run in element.text_elements:
        append_run(node, run)
    return node


def title_page_to_html(script: Script) -> ET.Element:
    header = ET.Element("header", {"class": "title-page"})
    ET.SubElement(header, "h1").text = script.title
    ET.SubElement(header, "p", {"class": "author"}).text = script.author
    return header


def body_elements(script: Script) -> list[ET.Element]:
    return [element_to_html(element) for element in script.elements]


@register_writer
class HtmlWriter(ScriptWriter):
    """Write scripts as a standalone HTML page with an embedded stylesheet."""

    format_name = "html"
    extension = ".html"
    media_type = "text/html"

    def write(self, script: Script) -> bytes:
        html = ET.Element("html", {"lang": "en"})
        head = ET.SubElement(html, "head")
        ET.SubElement(head, "meta", {"charset": "UTF-8"})
        ET.SubElement(head, "title").text = script.title
        ET.SubElement(head, "style").text = STYLESHEET

        body = ET.SubElement(html, "body")
        body.append(title_page_to_html(script))
        body.extend(body_elements(script))

        document = ET.tostring(html, encoding="unicode", method="html")
        return ("<!DOCTYPE html>\n" + document + "\n").encode("utf-8")

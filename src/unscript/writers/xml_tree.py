"""Serialization helpers shared by the XML-based writers."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from unscript.models import ElementType
from unscript.parser.structured import PARAGRAPH_TYPES

# Paragraph type name for each text element type
TYPE_NAMES: dict[ElementType, str] = {
    element_type: name for name, element_type in PARAGRAPH_TYPES.items()
}


def type_name(element_type: ElementType) -> str:
    return TYPE_NAMES.get(element_type, "Action")


def serialize(root: ET.Element, declaration: str) -> bytes:
    """Indent a tree and encode it as UTF-8 below an XML declaration."""
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return (declaration + "\n" + body + "\n").encode("utf-8")

"""EPUB 3 writer."""

from __future__ import annotations

import uuid
import xml.etree.ElementTree as ET
import zipfile
from datetime import UTC, datetime
from io import BytesIO

from unscript.models import Script
from unscript.writers.base import ScriptWriter, register_writer
from unscript.writers.html import STYLESHEET, body_elements, title_page_to_html

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
XHTML_NS = "http://www.w3.org/1999/xhtml"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
EPUB_NS = "http://www.idpf.org/2007/ops"
MIMETYPE = "application/epub+zip"

CONTAINER_XML = f"""{XML_DECLARATION}
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/script.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

MANIFEST: tuple[dict[str, str], ...] = (
    {
        "id": "nav",
        "href": "nav.xhtml",
        "media-type": "application/xhtml+xml",
        "properties": "nav",
    },
    {"id": "script", "href": "script.xhtml", "media-type": "application/xhtml+xml"},
    {"id": "css", "href": "style.css", "media-type": "text/css"},
)


def _xhtml(root: ET.Element) -> str:
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n<!DOCTYPE html>\n{body}\n"


def _page(
    title: str, stylesheet: str | None = None, **namespaces: str
) -> tuple[ET.Element, ET.Element]:
    """An XHTML page skeleton; returns the root and its body."""
    attributes = {"xmlns": XHTML_NS, "lang": "en"}
    attributes.update({f"xmlns:{prefix}": uri for prefix, uri in namespaces.items()})
    html = ET.Element("html", attributes)
    head = ET.SubElement(html, "head")
    ET.SubElement(head, "meta", {"charset": "UTF-8"})
    ET.SubElement(head, "title").text = title
    if stylesheet:
        ET.SubElement(head, "link", {"rel": "stylesheet", "href": stylesheet})
    return html, ET.SubElement(html, "body")


def book_identifier(script: Script) -> str:
    """Stable identifier derived from title and author."""
    name = f"unscript:{script.title}:{script.author}"
    return uuid.uuid5(uuid.NAMESPACE_URL, name).urn


@register_writer
class EpubWriter(ScriptWriter):
    """Write scripts as a single-chapter EPUB book."""

    format_name = "epub"
    extension = ".epub"
    media_type = MIMETYPE

    def write(self, script: Script) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as book:
            # Readers require an uncompressed mimetype as the first member
            book.writestr("mimetype", MIMETYPE, compress_type=zipfile.ZIP_STORED)
            book.writestr("META-INF/container.xml", CONTAINER_XML)
            book.writestr("OEBPS/script.xhtml", self.render_content(script))
            book.writestr("OEBPS/nav.xhtml", self.render_nav(script))
            book.writestr("OEBPS/style.css", STYLESHEET.lstrip())
            book.writestr("OEBPS/script.opf", self.render_package(script))
        return buffer.getvalue()

    @staticmethod
    def render_content(script: Script) -> str:
        html, body = _page(script.title, stylesheet="style.css")
        body.append(title_page_to_html(script))
        body.extend(body_elements(script))
        return _xhtml(html)

    @staticmethod
    def render_nav(script: Script) -> str:
        html, body = _page("Table of Contents", epub=EPUB_NS)
        nav = ET.SubElement(body, "nav", {"epub:type": "toc"})
        ET.SubElement(nav, "h1").text = "Table of Contents"
        item = ET.SubElement(ET.SubElement(nav, "ol"), "li")
        ET.SubElement(item, "a", {"href": "script.xhtml"}).text = script.title
        return _xhtml(html)

    @staticmethod
    def render_package(script: Script, modified: datetime | None = None) -> str:
        """The OPF package document: metadata, manifest and spine."""
        modified = modified or datetime.now(UTC)
        package = ET.Element(
            "package",
            {"version": "3.0", "xmlns": OPF_NS, "unique-identifier": "uid"},
        )
        metadata = ET.SubElement(package, "metadata", {"xmlns:dc": DC_NS})
        identifier = ET.SubElement(metadata, "dc:identifier", {"id": "uid"})
        identifier.text = book_identifier(script)
        ET.SubElement(metadata, "dc:title").text = script.title
        ET.SubElement(metadata, "dc:creator").text = script.author
        ET.SubElement(metadata, "dc:language").text = "en"
        ET.SubElement(metadata, "meta", {"property": "dcterms:modified"}).text = (
            modified.strftime("%Y-%m-%dT%H:%M:%SZ")
        )

        manifest = ET.SubElement(package, "manifest")
        for item in MANIFEST:
            ET.SubElement(manifest, "item", item)
        spine = ET.SubElement(package, "spine")
        ET.SubElement(spine, "itemref", {"idref": "script"})

        ET.indent(package, space="  ")
        return f"{XML_DECLARATION}\n{ET.tostring(package, encoding='unicode')}\n"

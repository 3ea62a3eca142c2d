"""Screenplay writers for Fountain, Final Draft, OSF, HTML and EPUB."""

from __future__ import annotations

from .base import (
    ScriptWriter,
    get_writer,
    register_writer,
    write_script,
    writer_formats,
)
from .epub import EpubWriter
from .fdx import FdxWriter
from .fountain import FountainWriter
from .html import HtmlWriter
from .osf import OsfWriter

__all__ = [
    "EpubWriter",
    "FdxWriter",
    "FountainWriter",
    "HtmlWriter",
    "OsfWriter",
    "ScriptWriter",
    "get_writer",
    "register_writer",
    "write_script",
    "writer_formats",
]

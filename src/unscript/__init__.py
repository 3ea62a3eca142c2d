"""Unscript: screenplay format conversion.

Fountain, Final Draft, Open Screenplay Format, PDF, Highland and Fade In
files are read into one document model and written back out as Fountain,
Final Draft, OSF, HTML or EPUB.
"""

from .config import UnscriptSettings, get_logger, get_settings
from .exceptions import UnscriptError
from .models import ElementType, Script, ScriptElement, Style, TextElement
from .reader import ScriptReader
from .writers import get_writer, write_script

__version__ = "0.1.0"

__all__ = [
    "ElementType",
    "Script",
    "ScriptElement",
    "ScriptReader",
    "Style",
    "TextElement",
    "UnscriptError",
    "UnscriptSettings",
    "__version__",
    "get_logger",
    "get_settings",
    "get_writer",
    "write_script",
]

"""Unscript document model."""

from __future__ import annotations

from .builder import ElementBuilder
from .document import (
    TEXT_TYPES,
    ElementType,
    Script,
    ScriptElement,
    Style,
    TextElement,
    coalesce_runs,
    default_title_page,
)

__all__ = [
    "TEXT_TYPES",
    "ElementBuilder",
    "ElementType",
    "Script",
    "ScriptElement",
    "Style",
    "TextElement",
    "coalesce_runs",
    "default_title_page",
]

"""Output formatters for CLI commands."""

from __future__ import annotations

from unscript.cli.formatters.base import OutputFormat, OutputFormatter
from unscript.cli.formatters.json_formatter import JsonFormatter
from unscript.cli.formatters.summary_formatter import ScriptSummaryFormatter

__all__ = [
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
    "ScriptSummaryFormatter",
]

"""Script summary formatter for the info command."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Group
from rich.table import Table

from unscript.cli.formatters.base import OutputFormat, OutputFormatter
from unscript.models import ElementType, Script


@dataclass
class ScriptSummary:
    """A parsed script together with where it came from."""

    source: str
    input_format: str
    script: Script
    include_elements: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "source": self.source,
            "format": self.input_format,
            "title_page": dict(self.script.title_page_items()),
            "element_counts": self.script.count_by_type(),
            "total_elements": len(self.script.elements),
        }
        if self.include_elements:
            data["elements"] = [element.to_dict() for element in self.script.elements]
        return data


class ScriptSummaryFormatter(OutputFormatter[ScriptSummary]):
    """Render title page and element counts as tables or JSON."""

    def format(
        self, data: ScriptSummary, format_type: OutputFormat = OutputFormat.TABLE
    ) -> Any:
        if format_type == OutputFormat.JSON:
            return json.dumps(data.to_dict(), indent=2)

        title_table = Table(title=f"{data.source} ({data.input_format})")
        title_table.add_column("Field", style="cyan")
        title_table.add_column("Value")
        for key, value in data.script.title_page_items():
            title_table.add_row(key, value)

        counts = data.script.count_by_type()
        count_table = Table(title="Elements")
        count_table.add_column("Type", style="cyan")
        count_table.add_column("Count", justify="right")
        for element_type in ElementType:
            if element_type.value in counts:
                count_table.add_row(element_type.value, str(counts[element_type.value]))
        count_table.add_row("total", str(len(data.script.elements)), style="bold")

        return Group(title_table, count_table)

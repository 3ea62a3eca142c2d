"""CLI command for unscript info."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from unscript.cli.formatters import OutputFormat, ScriptSummaryFormatter
from unscript.cli.formatters.summary_formatter import ScriptSummary
from unscript.cli.utils.error_handler import handle_cli_error
from unscript.config import get_logger, get_settings_for_cli
from unscript.reader import ScriptReader, detect_format

logger = get_logger(__name__)
console = Console()


def info_command(
    input_path: Annotated[Path, typer.Argument(help="Screenplay to inspect")],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON")
    ] = False,
    elements: Annotated[
        bool,
        typer.Option("--elements", help="Include every element in JSON output"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed error information"),
    ] = False,
) -> None:
    """Show the title page and element counts of a screenplay."""
    try:
        settings = get_settings_for_cli(config_file=config)
        input_format = detect_format(input_path.name)
        script = ScriptReader(settings).read_file(input_path)
        summary = ScriptSummary(
            source=input_path.name,
            input_format=input_format,
            script=script,
            include_elements=elements,
        )

        formatter = ScriptSummaryFormatter(console)
        if json_output:
            # Plain print keeps the output free of ANSI escape codes
            print(formatter.format(summary, OutputFormat.JSON))
        else:
            formatter.print(summary, OutputFormat.TABLE)
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, verbose=verbose)

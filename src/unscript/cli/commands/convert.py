"""CLI command for unscript convert."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from unscript.cli.utils.error_handler import handle_cli_error
from unscript.config import get_logger, get_settings_for_cli
from unscript.exceptions import UnscriptError
from unscript.reader import ScriptReader
from unscript.writers import get_writer

logger = get_logger(__name__)
console = Console()


def convert_command(
    input_path: Annotated[
        Path,
        typer.Argument(help="Screenplay to convert (.fountain, .fdx, .pdf, ...)"),
    ],
    to: Annotated[
        str | None,
        typer.Option(
            "--to",
            "-t",
            help="Output format: fountain, fdx, osf, html or epub",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file (default: input name with the format's extension)",
        ),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Override the title page title"),
    ] = None,
    author: Annotated[
        str | None,
        typer.Option("--author", help="Override the title page author"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed error information"),
    ] = False,
) -> None:
    """Convert a screenplay to another format.

    The input format is detected from the file extension. Fountain, Final
    Draft, Open Screenplay Format, PDF, Highland and Fade In files are read.
    """
    try:
        settings = get_settings_for_cli(config_file=config)
        script = ScriptReader(settings).read_file(input_path)
        if title:
            script.title_page["title"] = title
        if author:
            script.title_page["author"] = author

        writer = get_writer(to or settings.default_output_format)
        output_path = output or input_path.with_suffix(writer.extension)
        if output_path.resolve() == input_path.resolve():
            raise UnscriptError(
                message=f"Refusing to overwrite the input file: {input_path}",
                hint="Pass --output to choose a different destination.",
                details={"input": str(input_path), "format": writer.format_name},
            )

        writer.write_file(script, output_path)
        console.print(
            f"[green]✓[/green] Converted {input_path.name} to {output_path} "
            f"({len(script.elements)} elements)"
        )
    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, verbose=verbose)

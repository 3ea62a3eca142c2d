"""Main CLI entry point."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from unscript import __version__
from unscript.cli.commands import convert_command, info_command
from unscript.cli.formatters.json_formatter import JsonFormatter
from unscript.config import (
    UnscriptSettings,
    configure_logging,
    get_logger,
    get_settings,
    set_settings,
)
from unscript.reader import EXTENSION_FORMATS, MEDIA_TYPE_FORMATS
from unscript.writers import get_writer, writer_formats

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="unscript",
    help="Convert screenplays between Fountain, Final Draft, OSF, PDF and more",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="convert")(convert_command)
app.command(name="info")(info_command)


@app.command()
def formats() -> None:
    """List the supported input and output formats."""
    inputs = Table(title="Input formats")
    inputs.add_column("Format", style="cyan")
    inputs.add_column("Extensions")
    inputs.add_column("Media types")
    for input_format in dict.fromkeys(EXTENSION_FORMATS.values()):
        extensions = [e for e, f in EXTENSION_FORMATS.items() if f == input_format]
        media_types = [m for m, f in MEDIA_TYPE_FORMATS.items() if f == input_format]
        inputs.add_row(input_format, ", ".join(extensions), ", ".join(media_types))

    outputs = Table(title="Output formats")
    outputs.add_column("Format", style="cyan")
    outputs.add_column("Extension")
    outputs.add_column("Media type")
    for format_name in writer_formats():
        writer = get_writer(format_name)
        outputs.add_row(format_name, writer.extension, writer.media_type)

    console.print(inputs)
    console.print(outputs)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show Unscript version."""
    version_info = {"name": "Unscript", "version": __version__}

    if json_output:
        # Output pure JSON without ANSI escape codes
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"Unscript v{__version__}")


@app.callback()
def main_callback(
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging", envvar="UNSCRIPT_DEBUG"),
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only log errors")
    ] = False,
) -> None:
    """Configure global options."""
    if not (debug or quiet):
        return

    data = get_settings().model_dump()
    data.update(
        {"debug": True, "log_level": "DEBUG"} if debug else {"log_level": "ERROR"}
    )
    settings = UnscriptSettings(**data)
    set_settings(settings)
    configure_logging(settings)
    logger.debug("Debug mode enabled")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

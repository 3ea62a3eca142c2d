"""Error handling utilities for CLI commands."""

from __future__ import annotations

import traceback

import typer
from rich.console import Console

from unscript.config import get_logger
from unscript.exceptions import UnscriptError

logger = get_logger(__name__)
console = Console()


def handle_cli_error(
    error: Exception, verbose: bool = False, exit_code: int = 1
) -> None:
    """Report an error raised by a CLI command and exit.

    Args:
        error: The exception that was raised
        verbose: Whether to show details and tracebacks
        exit_code: Exit code to use when exiting
    """
    if isinstance(error, UnscriptError):
        console.print(f"[red]✗ {error.message}[/red]")

        if error.hint:
            console.print(f"[yellow]→ {error.hint}[/yellow]")

        if verbose and error.details:
            console.print("\n[dim]Details:[/dim]")
            for key, value in error.details.items():
                console.print(f"  [dim]{key}:[/dim] {value}")

        logger.error(
            "Unscript error occurred",
            error_type=type(error).__name__,
            message=error.message,
            hint=error.hint,
            details=error.details,
            exit_code=exit_code,
        )

    elif isinstance(error, FileNotFoundError):
        console.print(f"[red]✗ File not found: {error}[/red]")
        console.print("[yellow]→ Check that the file path is correct[/yellow]")
        logger.error(
            "File not found",
            error=str(error),
            filename=getattr(error, "filename", None),
            exit_code=exit_code,
        )

    else:
        console.print(f"[red]✗ Unexpected error: {error!s}[/red]")

        if verbose:
            console.print("\n[dim]Full traceback:[/dim]")
            console.print(traceback.format_exc())
        else:
            console.print("[dim]Run with --verbose for full error details[/dim]")

        logger.error(
            "Unexpected error occurred",
            error=str(error),
            error_type=type(error).__name__,
            exit_code=exit_code,
            exc_info=True,
        )

    raise typer.Exit(exit_code)

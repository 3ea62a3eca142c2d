"""Unscript CLI commands."""

from __future__ import annotations

from unscript.cli.commands.convert import convert_command
from unscript.cli.commands.info import info_command

__all__ = ["convert_command", "info_command"]

"""Tests for CLI main module."""

import json
from unittest.mock import patch

import pytest
import typer

from unscript import __version__
from unscript.cli.main import app, main
from unscript.config import get_settings


class TestCLIMain:
    """Test CLI main functionality."""

    def test_app_configuration(self):
        """Test that the main app is configured correctly."""
        assert isinstance(app, typer.Typer)
        assert app.info.name == "unscript"
        assert "Convert screenplays" in app.info.help
        assert app.pretty_exceptions_enable is False

    def test_app_has_commands(self):
        """Test that all expected commands are registered."""
        command_names = [cmd.name for cmd in app.registered_commands]
        for name in ("convert", "info"):
            assert name in command_names

    def test_main_function_calls_app(self):
        """Test that main function calls the app."""
        with patch("unscript.cli.main.app") as mock_app:
            mock_app.side_effect = SystemExit(0)
            with pytest.raises(SystemExit):
                main()
            mock_app.assert_called_once_with()

    def test_version(self, runner):
        """Test plain version output."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"Unscript v{__version__}" in result.output

    def test_version_json(self, runner):
        """Test JSON version output."""
        result = runner.invoke(app, ["version", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"name": "Unscript", "version": __version__}

    def test_formats(self, runner):
        """Test input and output formats are listed."""
        result = runner.invoke(app, ["formats"])
        assert result.exit_code == 0
        for name in ("Input formats", "Output formats", "highland", "epub", ".fdx"):
            assert name in result.output

    def test_debug_option_updates_settings(self, runner, restore_logging):
        """Test --debug switches on debug logging."""
        result = runner.invoke(app, ["--debug", "version"])
        assert result.exit_code == 0
        settings = get_settings()
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_quiet_option_updates_settings(self, runner, restore_logging):
        """Test --quiet only logs errors."""
        result = runner.invoke(app, ["--quiet", "version"])
        assert result.exit_code == 0
        assert get_settings().log_level == "ERROR"

    def test_help(self, runner):
        """Test the help text lists commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "convert" in result.output
        assert "info" in result.output

"""Unscript configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from unscript.exceptions import ConfigurationError, check_config_keys


class UnscriptSettings(BaseSettings):
    """Unscript configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: unscript convert script.pdf --author "Jane Doe"

    2. Config file values (YAML, TOML, or JSON)
       Example: unscript convert script.pdf --config unscript.yaml
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with UNSCRIPT_)
       Example: export UNSCRIPT_PDF_UNDERLINE_CHAR_WIDTH=6

    4. .env file (in current directory or specified path)
       Example: UNSCRIPT_LOG_LEVEL=DEBUG in .env file

    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="UNSCRIPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Conversion settings
    default_author: str = Field(
        default="Anonymous",
        description="Author used when the source carries no author",
    )
    default_output_format: str = Field(
        default="fountain",
        description="Writer used by 'convert' when --to is not given",
        pattern="^(?i)(fountain|fdx|osf|html|epub)$",
    )

    # PDF layout heuristics
    pdf_trim_inches: float = Field(
        default=1.0,
        description="Margin band (inches) ignored on every side of a PDF page",
        ge=0.0,
    )
    pdf_position_error_margin: float = Field(
        default=10.0,
        description="Tolerance in PDF units for margin, gap and underline matches",
        gt=0.0,
    )
    pdf_title_page_threshold: int = Field(
        default=20,
        description="Page 1 is a title page when it has fewer lines than this",
        ge=0,
    )
    pdf_underline_char_width: float = Field(
        default=7.0,
        description="Assumed glyph width used to map underline strokes to text",
        gt=0.0,
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path."""
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        if isinstance(v, (dict, list, set, tuple)):  # noqa: UP038
            raise ValueError(
                f"Path fields cannot accept {type(v).__name__} types. "
                f"Expected str or Path, got: {v!r}"
            )
        return Path(str(v)).resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", "default_output_format", mode="before")
    @classmethod
    def normalize_lowercase(cls, v: Any) -> str:
        """Normalize enumerated string settings to lowercase."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"Expected a string, got {type(v).__name__}")

    @classmethod
    def from_env(cls) -> UnscriptSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> UnscriptSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> UnscriptSettings:
        """Load settings with proper precedence from multiple sources.

        Precedence (highest to lowest):
        1. CLI arguments
        2. Config files (last file wins)
        3. Environment variables
        4. .env file
        5. Default values

        Args:
            config_files: List of config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                    data.update(file_settings.model_dump(exclude_unset=True))
                except FileNotFoundError:
                    from unscript.config.logging import get_logger as _get_logger

                    logger = _get_logger("unscript.config.settings")
                    logger.warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )

        if env_file:
            settings = cast(
                "UnscriptSettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: UnscriptSettings | None = None


def _get_config_paths() -> list[Path | str]:
    """Get list of existing config files, later files overriding earlier."""
    potential_paths = [
        Path.home() / ".config" / "unscript" / "config.yaml",
        Path.home() / ".config" / "unscript" / "config.toml",
        Path.home() / ".config" / "unscript" / "config.json",
        Path.cwd() / "unscript.yaml",
        Path.cwd() / "unscript.toml",
        Path.cwd() / "unscript.json",
    ]

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> UnscriptSettings:
    """Get the global settings instance.

    Returns:
        Global UnscriptSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = UnscriptSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = UnscriptSettings.from_env()
    return _settings


def set_settings(settings: UnscriptSettings | None) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally, or None to force a reload.
    """
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces recreation of settings on next call to get_settings(),
    useful for tests that modify environment variables.
    """
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> UnscriptSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: Dictionary of CLI argument overrides.
                      Only non-None values are applied.

    Returns:
        UnscriptSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return UnscriptSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered_overrides:
            data = settings.model_dump()
            data.update(filtered_overrides)
            settings = UnscriptSettings(**data)
    return settings

"""Custom exception hierarchy for Unscript with helpful error messages."""

from __future__ import annotations

from typing import Any


class UnscriptError(Exception):
    """Base exception with helpful formatting for all Unscript errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(UnscriptError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class FormatDetectionError(UnscriptError):
    """No reader recognizes the declared media type or file extension."""

    pass


class MalformedContainerError(UnscriptError):
    """A zip, XML or PDF container is unreadable or misses an expected member."""

    pass


class ParseError(UnscriptError):
    """Screenplay text could not be read or decoded."""

    pass


class UnknownWriterError(UnscriptError):
    """Requested output format has no registered writer."""

    pass


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "author": "default_author",
        "output_format": "default_output_format",
        "char_width": "pdf_underline_char_width",
        "error_margin": "pdf_position_error_margin",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )

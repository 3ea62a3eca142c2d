"""Tests for custom exception classes."""

import pytest

from unscript.exceptions import (
    ConfigurationError,
    FormatDetectionError,
    MalformedContainerError,
    ParseError,
    UnknownWriterError,
    UnscriptError,
    check_config_keys,
)


class TestUnscriptError:
    """Test the base exception formatting."""

    def test_message_only(self):
        """Test a bare message."""
        error = UnscriptError("Something broke")
        assert str(error) == "Error: Something broke"
        assert error.hint is None
        assert error.details is None

    def test_full(self):
        """Test message, hint and details are all rendered."""
        error = UnscriptError(
            message="Bad file",
            hint="Try another",
            details={"path": "a.fdx", "size": 0},
        )
        assert str(error) == (
            "Error: Bad file\nHint: Try another\nDetails:\n  path: a.fdx\n  size: 0"
        )

    @pytest.mark.parametrize(
        "error_class",
        [
            ConfigurationError,
            FormatDetectionError,
            MalformedContainerError,
            ParseError,
            UnknownWriterError,
        ],
    )
    def test_hierarchy(self, error_class):
        """Test every error is an UnscriptError."""
        error = error_class("x")
        assert isinstance(error, UnscriptError)
        assert error.message == "x"


class TestCheckConfigKeys:
    """Test detection of common configuration mistakes."""

    def test_valid_keys(self):
        """Test correct keys pass."""
        check_config_keys({"default_author": "A", "log_level": "INFO"})

    @pytest.mark.parametrize(
        ("wrong", "correct"),
        [
            ("author", "default_author"),
            ("output_format", "default_output_format"),
            ("char_width", "pdf_underline_char_width"),
            ("error_margin", "pdf_position_error_margin"),
        ],
    )
    def test_wrong_keys(self, wrong, correct):
        """Test misspelled keys raise with the right hint."""
        with pytest.raises(ConfigurationError) as exc:
            check_config_keys({wrong: 1})
        assert exc.value.details["correct_key"] == correct
        assert correct in exc.value.hint

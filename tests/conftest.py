"""Pytest configuration and fixtures."""

import logging
import os
from collections.abc import Callable, Iterator

import pytest
import structlog
from typer.testing import CliRunner

from unscript.config import UnscriptSettings, reset_settings, set_settings
from unscript.parser.pdf_layout import GlyphFragment, PageContent, StrokePath

SAMPLE_FOUNTAIN = """Title: Round Trip
Author: Tester

INT. KITCHEN - NIGHT

A **bold** move, *very* _quiet_.

JOE
(whispering)
Where is it?

MARY
Over ***there***.

CUT TO:

> THE END <

!INT. THIS IS ACTION

@McCLANE
Yippee.

JOE
Hi

MARY ^
Hey
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path) -> Iterator[UnscriptSettings]:
    """Run every test with default settings, isolated from the host.

    Environment overrides and config files in the working directory are
    hidden, and the global settings are reset afterwards.
    """
    for key in list(os.environ):
        if key.startswith("UNSCRIPT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    settings = UnscriptSettings()
    set_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def settings(isolated_settings) -> UnscriptSettings:
    """The settings active for the current test."""
    return isolated_settings


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_fountain() -> str:
    """Fountain text exercising every element type and dual dialogue."""
    return SAMPLE_FOUNTAIN


@pytest.fixture
def make_page() -> Callable[..., PageContent]:
    """Build a PageContent from (text, x, y) tuples on a US Letter page."""

    def _make_page(
        lines: list[tuple[str, float, float]],
        font_name: str = "Courier",
        height: float = 12.0,
        paths: list[StrokePath] | None = None,
    ) -> PageContent:
        return PageContent(
            fragments=[
                GlyphFragment(text=text, font_name=font_name, x=x, y=y, height=height)
                for text, x, y in lines
            ],
            paths=paths or [],
            width=612.0,
            height=792.0,
        )

    return _make_page


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo logging reconfiguration made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    config = structlog.get_config()
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.configure(**config)

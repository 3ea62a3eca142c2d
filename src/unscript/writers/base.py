"""Base class and registry for screenplay writers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from unscript.config import get_logger
from unscript.exceptions import UnknownWriterError
from unscript.models import Script

logger = get_logger(__name__)


class ScriptWriter(ABC):
    """Serialize a :class:`Script` into one output format.

    Writers represent element type, text, bold/italic/underline, centering
    and dual dialogue where the target format supports them, and silently
    drop what it cannot express.
    """

    format_name: ClassVar[str]
    extension: ClassVar[str]
    media_type: ClassVar[str] = "application/octet-stream"

    @abstractmethod
    def write(self, script: Script) -> bytes:
        """Serialize a script.

        Args:
            script: Script to serialize

        Returns:
            Encoded document
        """
        pass

    def write_file(self, script: Script, file_path: Path) -> Path:
        """Serialize a script to a file, replacing any existing content."""
        data = self.write(script)
        file_path.write_bytes(data)
        logger.info(
            "Wrote screenplay",
            format=self.format_name,
            path=str(file_path),
            size=len(data),
        )
        return file_path


_WRITERS: dict[str, type[ScriptWriter]] = {}


def register_writer(writer_class: type[ScriptWriter]) -> type[ScriptWriter]:
    """Class decorator adding a writer to the registry under its format name."""
    _WRITERS[writer_class.format_name] = writer_class
    return writer_class


def writer_formats() -> list[str]:
    """Registered output format names."""
    return list(_WRITERS)


def get_writer(format_name: str) -> ScriptWriter:
    """Instantiate the writer registered for an output format.

    Raises:
        UnknownWriterError: If no writer handles the format
    """
    writer_class = _WRITERS.get(format_name.lower())
    if writer_class is None:
        raise UnknownWriterError(
            message=f"Unknown output format: {format_name}",
            hint=f"Choose one of: {', '.join(writer_formats())}",
            details={"format": format_name},
        )
    return writer_class()


def write_script(script: Script, format_name: str) -> bytes:
    """Serialize a script with the writer registered for a format."""
    return get_writer(format_name).write(script)

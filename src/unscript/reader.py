"""Format detection and dispatch to the screenplay parsers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path, PurePath

from unscript.config import UnscriptSettings, get_logger, get_settings
from unscript.exceptions import FormatDetectionError
from unscript.models import Script
from unscript.parser import (
    FdxParser,
    FountainParser,
    OsfParser,
    PdfContentExtractor,
    PdfLayoutClassifier,
    unpack,
)

logger = get_logger(__name__)

# Input format name by file extension and by media type
EXTENSION_FORMATS: dict[str, str] = {
    ".fountain": "fountain",
    ".spmd": "fountain",
    ".fdx": "fdx",
    ".xml": "osf",
    ".pdf": "pdf",
    ".highland": "highland",
    ".fadein": "fadein",
}
MEDIA_TYPE_FORMATS: dict[str, str] = {
    "text/plain": "fountain",
    "text/xml": "osf",
    "application/xml": "osf",
    "application/pdf": "pdf",
}

HIGHLAND_MEMBER = r"text\.fountain"
FADE_IN_MEMBER = r"document\.xml"


def detect_format(file_name: str, media_type: str | None = None) -> str:
    """Name the input format from the file extension, then the media type.

    Args:
        file_name: File name, only its extension is used
        media_type: Declared media type, if any

    Returns:
        One of the input format names in :data:`EXTENSION_FORMATS`

    Raises:
        FormatDetectionError: If neither identifies a supported format
    """
    extension = PurePath(file_name).suffix.lower()
    if extension in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[extension]

    if media_type:
        base_type = media_type.split(";", 1)[0].strip().lower()
        if base_type in MEDIA_TYPE_FORMATS:
            return MEDIA_TYPE_FORMATS[base_type]

    raise FormatDetectionError(
        message=f"Unsupported screenplay format: {file_name}",
        hint=(
            "Supported extensions: "
            + ", ".join(sorted(EXTENSION_FORMATS))
            + ". Rename the file or pass a media type."
        ),
        details={"file_name": file_name, "media_type": media_type},
    )


def input_formats() -> list[str]:
    """Input format names in a stable order."""
    return list(dict.fromkeys(EXTENSION_FORMATS.values()))


class ScriptReader:
    """Read any supported screenplay file into a :class:`Script`."""

    def __init__(
        self,
        settings: UnscriptSettings | None = None,
        pdf_extractor: PdfContentExtractor | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            settings: Settings shared by all parsers
            pdf_extractor: PDF content source, pdfplumber-backed by default
        """
        self.settings = settings or get_settings()
        self.pdf_extractor = pdf_extractor or PdfContentExtractor()
        self._readers: dict[str, Callable[[bytes, str, str], Script]] = {
            "fountain": self._read_fountain,
            "fdx": self._read_fdx,
            "osf": self._read_osf,
            "pdf": self._read_pdf,
            "highland": self._read_highland,
            "fadein": self._read_fade_in,
        }

    def read_file(self, file_path: Path, media_type: str | None = None) -> Script:
        """Read and parse a screenplay file.

        Args:
            file_path: Path to the screenplay
            media_type: Declared media type, consulted after the extension

        Returns:
            Parsed Script, titled after the file name unless it has a title
        """
        file_path = Path(file_path)
        return self.read_bytes(file_path.read_bytes(), file_path.name, media_type)

    def read_bytes(
        self, data: bytes, file_name: str, media_type: str | None = None
    ) -> Script:
        """Parse screenplay bytes whose format is known from their file name.

        Args:
            data: Raw file content
            file_name: Original file name, for format detection and title
            media_type: Declared media type, consulted after the extension

        Returns:
            Parsed Script

        Raises:
            FormatDetectionError: If the format is not supported
        """
        input_format = detect_format(file_name, media_type)
        title = PurePath(file_name).stem
        logger.info(
            "Reading screenplay",
            file_name=file_name,
            format=input_format,
            size=len(data),
        )
        return self._readers[input_format](data, title, file_name)

    def _read_fountain(self, data: bytes, title: str, source: str) -> Script:
        return FountainParser(self.settings).parse_bytes(data, title)

    def _read_fdx(self, data: bytes, title: str, source: str) -> Script:
        return FdxParser(self.settings).parse(data, title)

    def _read_osf(self, data: bytes, title: str, source: str) -> Script:
        return OsfParser(self.settings).parse(data, title)

    def _read_pdf(self, data: bytes, title: str, source: str) -> Script:
        pages = self.pdf_extractor.extract(data, source)
        return PdfLayoutClassifier(settings=self.settings).classify(pages, title)

    def _read_highland(self, data: bytes, title: str, source: str) -> Script:
        return self._read_fountain(unpack(data, HIGHLAND_MEMBER, source), title, source)

    def _read_fade_in(self, data: bytes, title: str, source: str) -> Script:
        return self._read_osf(unpack(data, FADE_IN_MEMBER, source), title, source)

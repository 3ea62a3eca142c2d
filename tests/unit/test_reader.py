"""Tests for format detection and the screenplay reader."""

import zipfile
from io import BytesIO
from unittest.mock import MagicMock

import pytest

from unscript.exceptions import FormatDetectionError, MalformedContainerError
from unscript.models import ElementType
from unscript.parser.pdf_layout import GlyphFragment, PageContent
from unscript.reader import ScriptReader, detect_format, input_formats

FOUNTAIN = b"Title: Zipped\n\nINT. HOUSE - DAY\n\nJOE\nHello.\n"
OSF = (
    b"<document><paragraphs>"
    b'<para><style basestyle="Action"/><text>Inside a Fade In file.</text></para>'
    b"</paragraphs></document>"
)


def make_zip(members):
    """Zip the given name to bytes mapping in memory."""
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


class TestDetectFormat:
    """Test input format detection."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("pilot.fountain", "fountain"),
            ("pilot.spmd", "fountain"),
            ("PILOT.FDX", "fdx"),
            ("pilot.xml", "osf"),
            ("pilot.pdf", "pdf"),
            ("pilot.highland", "highland"),
            ("pilot.fadein", "fadein"),
        ],
    )
    def test_by_extension(self, file_name, expected):
        """Test extensions are matched case-insensitively."""
        assert detect_format(file_name) == expected

    def test_extension_wins_over_media_type(self):
        """Test the extension is consulted first."""
        assert detect_format("pilot.fdx", "application/pdf") == "fdx"

    def test_by_media_type(self):
        """Test media type parameters are ignored."""
        assert detect_format("pilot.txt", "text/plain; charset=utf-8") == "fountain"
        assert detect_format("upload", "application/pdf") == "pdf"

    def test_unknown(self):
        """Test unsupported files raise FormatDetectionError."""
        with pytest.raises(FormatDetectionError) as exc:
            detect_format("pilot.docx", "application/msword")
        assert exc.value.details["file_name"] == "pilot.docx"
        assert ".fountain" in exc.value.hint

    def test_input_formats(self):
        """Test each input format is listed once."""
        assert input_formats() == [
            "fountain",
            "fdx",
            "osf",
            "pdf",
            "highland",
            "fadein",
        ]


class TestScriptReader:
    """Test reading each input format."""

    def test_read_fountain_file(self, tmp_path):
        """Test Fountain files are parsed and titled after the file."""
        path = tmp_path / "pilot.fountain"
        path.write_text("INT. HOUSE - DAY\n\nAction.", encoding="utf-8")
        script = ScriptReader().read_file(path)
        assert script.title == "pilot"
        assert [e.type for e in script.elements] == [
            ElementType.SCENE_HEADING,
            ElementType.ACTION,
        ]

    def test_read_highland(self):
        """Test the Fountain member of a Highland archive is read."""
        data = make_zip(
            {
                "Zipped.textbundle/info.json": b"{}",
                "Zipped.textbundle/text.fountain": FOUNTAIN,
            }
        )
        script = ScriptReader().read_bytes(data, "zipped.highland")
        assert script.title == "Zipped"
        assert [e.plain_text for e in script.elements] == [
            "INT. HOUSE - DAY",
            "JOE",
            "Hello.",
        ]

    def test_read_fade_in(self):
        """Test the OSF member of a Fade In archive is read."""
        script = ScriptReader().read_bytes(
            make_zip({"document.xml": OSF}), "draft.fadein"
        )
        assert script.title == "draft"
        assert script.elements[0].plain_text == "Inside a Fade In file."

    def test_highland_without_fountain_member(self):
        """Test a Highland archive without text.fountain is malformed."""
        with pytest.raises(MalformedContainerError):
            ScriptReader().read_bytes(make_zip({"x.txt": b""}), "broken.highland")

    def test_read_pdf_with_injected_extractor(self):
        """Test PDF bytes go through the extractor and the classifier."""
        extractor = MagicMock()
        extractor.extract.return_value = [
            PageContent(
                fragments=[
                    GlyphFragment("A TITLE", "Courier", 250, 500, 12),
                    GlyphFragment("written by", "Courier", 260, 470, 12),
                    GlyphFragment("Someone", "Courier", 262, 455, 12),
                ]
            )
        ]
        script = ScriptReader(pdf_extractor=extractor).read_bytes(b"%PDF", "a.pdf")
        extractor.extract.assert_called_once_with(b"%PDF", "a.pdf")
        assert script.title_page == {"title": "A TITLE", "author": "Someone"}

    def test_media_type_fallback(self):
        """Test a declared media type selects the reader."""
        script = ScriptReader().read_bytes(b"Action.", "upload.txt", "text/plain")
        assert script.elements[0].plain_text == "Action."

    def test_unsupported(self):
        """Test unknown files raise FormatDetectionError."""
        with pytest.raises(FormatDetectionError):
            ScriptReader().read_bytes(b"", "notes.docx")

"""Tests for the info command."""

import json

import pytest

from unscript.cli.main import app


@pytest.fixture
def fountain_file(tmp_path, sample_fountain):
    """A Fountain screenplay on disk."""
    path = tmp_path / "pilot.fountain"
    path.write_text(sample_fountain, encoding="utf-8")
    return path


class TestInfoCommand:
    """Test summarizing a screenplay."""

    def test_table_output(self, runner, fountain_file):
        """Test the title page and counts are shown as tables."""
        result = runner.invoke(app, ["info", str(fountain_file)])
        assert result.exit_code == 0, result.output
        for text in ("Round Trip", "Tester", "Elements", "sceneHeading", "total"):
            assert text in result.output

    def test_json_output(self, runner, fountain_file):
        """Test JSON output is machine readable."""
        result = runner.invoke(app, ["info", str(fountain_file), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["source"] == "pilot.fountain"
        assert data["format"] == "fountain"
        assert data["title_page"] == {"title": "Round Trip", "author": "Tester"}
        assert data["element_counts"] == {
            "sceneHeading": 1,
            "action": 3,
            "character": 3,
            "parenthetical": 1,
            "dialogue": 3,
            "transition": 1,
            "dualDialogue": 1,
        }
        assert data["total_elements"] == 13
        assert "elements" not in data

    def test_json_with_elements(self, runner, fountain_file):
        """Test --elements includes every element."""
        result = runner.invoke(
            app, ["info", str(fountain_file), "--json", "--elements"]
        )
        assert result.exit_code == 0, result.output
        elements = json.loads(result.stdout)["elements"]
        assert elements[0] == {
            "type": "sceneHeading",
            "text_elements": [{"text": "INT. KITCHEN - NIGHT", "styles": []}],
        }
        assert elements[-1]["type"] == "dualDialogue"

    def test_unsupported_file(self, runner, tmp_path):
        """Test unsupported files fail with a hint."""
        source = tmp_path / "notes.docx"
        source.write_bytes(b"")
        result = runner.invoke(app, ["info", str(source)])
        assert result.exit_code == 1
        assert "Unsupported screenplay format" in result.output

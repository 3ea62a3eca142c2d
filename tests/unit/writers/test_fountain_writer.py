"""Tests for the Fountain writer."""

import pytest

from unscript.models import ElementType, Script, ScriptElement, Style, TextElement
from unscript.parser import FountainParser
from unscript.writers import FountainWriter
from unscript.writers.fountain import escape_text, format_line, render_runs


def element_dicts(script):
    return [element.to_dict() for element in script.elements]


@pytest.fixture
def writer():
    """Create a Fountain writer."""
    return FountainWriter()


class TestRenderRuns:
    """Test emphasis markup output."""

    def test_toggles_only_changes(self):
        """Test markers are emitted where styles change."""
        runs = [
            TextElement("A "),
            TextElement("bold", frozenset({Style.BOLD})),
            TextElement(" and ", frozenset({Style.BOLD, Style.ITALIC})),
            TextElement("plain"),
        ]
        assert render_runs(runs) == "A **bold* and ***plain"

    def test_closes_open_styles(self):
        """Test styles still open at the end are closed."""
        runs = [TextElement("under", frozenset({Style.UNDERLINE}))]
        assert render_runs(runs) == "_under_"

    def test_escapes_markup_characters(self):
        """Test literal markup characters are escaped."""
        assert escape_text("2*3_4\\5") == "2\\*3\\_4\\\\5"


class TestFormatLine:
    """Test single element rendering and forcing markers."""

    def test_ambiguous_action_is_forced(self):
        """Test action shaped like another element gets a ! marker."""
        heading = ScriptElement.text(ElementType.ACTION, "INT. NOT A SLUG")
        assert format_line(heading) == "!INT. NOT A SLUG"
        transition = ScriptElement.text(ElementType.ACTION, "CUT TO:")
        assert format_line(transition) == "!CUT TO:"
        cue = ScriptElement.text(ElementType.ACTION, "BANG")
        assert format_line(cue, followed_by_text=True) == "!BANG"
        assert format_line(cue) == "BANG"

    def test_character_forced_when_lowercase(self):
        """Test cues with lowercase letters get an @ marker."""
        cue = ScriptElement.text(ElementType.CHARACTER, "McCLANE")
        assert format_line(cue, followed_by_text=True) == "@McCLANE"

    def test_character_without_dialogue_is_forced(self):
        """Test a cue with nothing below it gets an @ marker."""
        cue = ScriptElement.text(ElementType.CHARACTER, "JOE")
        assert format_line(cue) == "@JOE"

    def test_scene_heading_forced(self):
        """Test a heading without a standard prefix gets a . marker."""
        heading = ScriptElement.text(ElementType.SCENE_HEADING, "OPENING TITLES")
        assert format_line(heading) == ".OPENING TITLES"

    def test_transition_forced(self):
        """Test a transition not ending in TO: gets a > marker."""
        transition = ScriptElement.text(ElementType.TRANSITION, "FADE OUT.")
        assert format_line(transition) == "> FADE OUT."

    def test_centered(self):
        """Test centered action is wrapped in angle brackets."""
        end = ScriptElement.text(ElementType.ACTION, "THE END", centered=True)
        assert format_line(end) == "> THE END <"

    def test_dialogue_guards(self):
        """Test dialogue that would read as something else is escaped."""
        assert format_line(ScriptElement.text(ElementType.DIALOGUE, "(aside)")) == (
            "\\(aside)"
        )
        assert format_line(ScriptElement.text(ElementType.DIALOGUE, "CUT TO:")) == (
            "CUT TO\\:"
        )
        assert format_line(ScriptElement.text(ElementType.DIALOGUE, "")) == "\\"

    def test_dual_cue_suffix(self):
        """Test the right column cue carries a caret."""
        cue = ScriptElement.text(ElementType.CHARACTER, "MARY")
        assert format_line(cue, followed_by_text=True, dual_cue=True) == "MARY ^"


class TestFountainWriter:
    """Test whole-document output."""

    def test_title_page(self, writer):
        """Test title page keys are written first, multi-line values indented."""
        script = Script(
            title_page={
                "credit": "written by",
                "title": "Big Fish",
                "author": "John August",
                "notes": "Line one\nLine two",
            }
        )
        assert writer.render_title_page(script) == (
            "Title: Big Fish\n"
            "Author: John August\n"
            "Credit: written by\n"
            "Notes:\n"
            "    Line one\n"
            "    Line two"
        )

    def test_layout(self, writer):
        """Test blank lines separate blocks but not dialogue lines."""
        script = Script(
            title_page={"title": "T", "author": "A"},
            elements=[
                ScriptElement.text(ElementType.SCENE_HEADING, "INT. HOUSE - DAY"),
                ScriptElement.text(ElementType.CHARACTER, "JOE"),
                ScriptElement.text(ElementType.PARENTHETICAL, "(beat)"),
                ScriptElement.text(ElementType.DIALOGUE, "Hi."),
            ],
        )
        assert writer.render(script) == (
            "Title: T\nAuthor: A\n\nINT. HOUSE - DAY\n\nJOE\n(beat)\nHi.\n"
        )

    def test_round_trip(self, writer, sample_fountain):
        """Test written Fountain parses back to the same document."""
        parser = FountainParser()
        original = parser.parse(sample_fountain)
        reparsed = parser.parse(writer.write(original).decode("utf-8"))

        assert reparsed.title_page == original.title_page
        assert element_dicts(reparsed) == element_dicts(original)

    def test_round_trip_of_tricky_text(self, writer):
        """Test escaped and forced lines survive a round trip."""
        script = Script(
            title_page={"title": "Tricky", "author": "Tester"},
            elements=[
                ScriptElement.text(ElementType.ACTION, "*not italic* and 2_000"),
                ScriptElement.text(ElementType.ACTION, "INT. FAKE HEADING"),
                ScriptElement.text(ElementType.ACTION, "> not centered"),
                ScriptElement.text(ElementType.CHARACTER, "JOE"),
                ScriptElement.text(ElementType.DIALOGUE, "CUT TO:"),
                ScriptElement.text(ElementType.DIALOGUE, "(not a parenthetical)"),
                ScriptElement.text(ElementType.SCENE_HEADING, "LATER"),
                ScriptElement.text(ElementType.TRANSITION, "FADE OUT."),
                ScriptElement.text(ElementType.CHARACTER, "MARY"),
                ScriptElement.text(ElementType.ACTION, "He waves."),
                ScriptElement.text(ElementType.TRANSITION, "CUT TO:"),
                ScriptElement.text(ElementType.SCENE_HEADING, "INT. HALL - DAY"),
                ScriptElement.text(ElementType.ACTION, "THE END", centered=True),
                ScriptElement.text(ElementType.DIALOGUE, "Hi there"),
            ],
        )
        reparsed = FountainParser().parse(writer.write(script).decode("utf-8"))
        assert element_dicts(reparsed) == element_dicts(script)

    def test_action_inside_dialogue_round_trip(self, writer):
        """Test action interrupting a speech keeps the speech together."""
        parser = FountainParser()
        original = parser.parse("JOE\n!He waves.\nHi there\n")
        assert [element.type for element in original.elements] == [
            ElementType.CHARACTER,
            ElementType.ACTION,
            ElementType.DIALOGUE,
        ]

        written = writer.render(original)
        assert written.endswith("JOE\n!He waves.\nHi there\n")
        assert element_dicts(parser.parse(written)) == element_dicts(original)

    def test_interruption_without_resumed_dialogue_gets_blank_line(self, writer):
        """Test an element after the last dialogue line starts a new block."""
        elements = [
            ScriptElement.text(ElementType.CHARACTER, "JOE"),
            ScriptElement.text(ElementType.DIALOGUE, "Hi."),
            ScriptElement.text(ElementType.ACTION, "He leaves."),
        ]
        assert writer.attached_to_dialogue(elements) == [False, False, False]
        script = Script(title_page={"title": "T", "author": "A"}, elements=elements)
        assert writer.render(script).endswith("JOE\nHi.\n\nHe leaves.\n")

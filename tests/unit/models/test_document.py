"""Tests for the screenplay document model."""

import pytest

from unscript.models import (
    ElementBuilder,
    ElementType,
    Script,
    ScriptElement,
    Style,
    TextElement,
    coalesce_runs,
    default_title_page,
)


class TestStyle:
    """Test style name parsing."""

    def test_parse_known_names(self):
        """Test names are matched case-insensitively."""
        assert Style.parse(["Bold", " italic "]) == {Style.BOLD, Style.ITALIC}

    def test_parse_drops_unknown_names(self):
        """Test unknown style names are ignored."""
        assert Style.parse(["AllCaps", "Underline", ""]) == {Style.UNDERLINE}


class TestCoalesceRuns:
    """Test merging of neighbouring runs."""

    def test_merges_equal_styles(self):
        """Test runs with the same styles are joined."""
        runs = [
            TextElement("Hello ", frozenset({Style.BOLD})),
            TextElement("there", frozenset({Style.BOLD})),
            TextElement("!"),
        ]
        assert coalesce_runs(runs) == [
            TextElement("Hello there", frozenset({Style.BOLD})),
            TextElement("!"),
        ]

    def test_drops_empty_runs(self):
        """Test empty runs vanish and do not split neighbours."""
        runs = [
            TextElement("a"),
            TextElement("", frozenset({Style.ITALIC})),
            TextElement("b"),
        ]
        assert coalesce_runs(runs) == [TextElement("ab")]

    def test_all_empty_keeps_one_run(self):
        """Test an element never ends up without runs."""
        assert coalesce_runs([TextElement(""), TextElement("")]) == [TextElement()]


class TestScriptElement:
    """Test element construction and validation."""

    def test_text_from_string(self):
        """Test building an element from a plain string."""
        element = ScriptElement.text(ElementType.ACTION, "He runs.")
        assert element.plain_text == "He runs."
        assert element.text_elements == [TextElement("He runs.")]
        assert not element.centered

    def test_type_from_string_value(self):
        """Test element types can be given by value."""
        element = ScriptElement.text("sceneHeading", "INT. HOUSE - DAY")
        assert element.type is ElementType.SCENE_HEADING

    def test_empty_runs_get_one_empty_run(self):
        """Test text elements always carry at least one run."""
        element = ScriptElement.text(ElementType.DIALOGUE, [])
        assert element.text_elements == [TextElement()]

    def test_dual_holds_columns(self):
        """Test dual dialogue elements carry two columns."""
        left = [ScriptElement.text(ElementType.CHARACTER, "JOE")]
        right = [ScriptElement.text(ElementType.CHARACTER, "MARY")]
        element = ScriptElement.dual(left, right)
        assert element.is_dual
        assert element.left == left
        assert element.right == right

    def test_dual_cannot_nest(self):
        """Test a dual block inside a column is rejected."""
        inner = ScriptElement.dual()
        with pytest.raises(ValueError, match="nested"):
            ScriptElement.dual(left=[inner])

    def test_text_element_cannot_have_columns(self):
        """Test only dual dialogue elements carry columns."""
        with pytest.raises(ValueError, match="columns"):
            ScriptElement(
                type=ElementType.ACTION,
                left=[ScriptElement.text(ElementType.CHARACTER, "JOE")],
            )

    def test_dual_cannot_carry_text(self):
        """Test dual dialogue elements have no runs of their own."""
        with pytest.raises(ValueError, match="text runs"):
            ScriptElement(
                type=ElementType.DUAL_DIALOGUE, text_elements=[TextElement("x")]
            )

    def test_retyped_keeps_runs(self):
        """Test retyping copies the runs into a new element."""
        element = ScriptElement.text(
            ElementType.ACTION, [TextElement("Hi", frozenset({Style.ITALIC}))]
        )
        retyped = element.retyped(ElementType.DIALOGUE)
        assert retyped.type is ElementType.DIALOGUE
        assert retyped.text_elements == element.text_elements
        assert retyped is not element

    def test_to_dict(self):
        """Test dictionary form of text and dual elements."""
        element = ScriptElement.text(
            ElementType.ACTION,
            [TextElement("THE END", frozenset({Style.UNDERLINE, Style.BOLD}))],
            centered=True,
        )
        assert element.to_dict() == {
            "type": "action",
            "text_elements": [{"text": "THE END", "styles": ["bold", "underline"]}],
            "centered": True,
        }
        dual = ScriptElement.dual(
            [ScriptElement.text(ElementType.CHARACTER, "JOE")], []
        )
        assert dual.to_dict()["left"][0]["type"] == "character"
        assert dual.to_dict()["right"] == []


class TestScript:
    """Test script-level helpers."""

    @pytest.fixture
    def script(self):
        """A script with one dual dialogue block."""
        return Script(
            title_page={"draft": "First", "author": "Jane", "title": "Test"},
            elements=[
                ScriptElement.text(ElementType.SCENE_HEADING, "INT. HOUSE - DAY"),
                ScriptElement.dual(
                    [
                        ScriptElement.text(ElementType.CHARACTER, "JOE"),
                        ScriptElement.text(ElementType.DIALOGUE, "Hi"),
                    ],
                    [
                        ScriptElement.text(ElementType.CHARACTER, "MARY"),
                        ScriptElement.text(ElementType.DIALOGUE, "Hey"),
                    ],
                ),
                ScriptElement.text(ElementType.ACTION, "They leave."),
            ],
        )

    def test_defaults(self):
        """Test an empty script has the fallback title page."""
        script = Script()
        assert script.title == "Untitled"
        assert script.author == "Anonymous"
        assert script.elements == []
        assert script.styles == {}

    def test_default_title_page(self):
        """Test fallback title and author."""
        assert default_title_page("draft_two", "Nobody") == {
            "title": "draft_two",
            "author": "Nobody",
        }
        assert default_title_page(None)["title"] == "Untitled"

    def test_title_page_items_order(self, script):
        """Test title and author come first."""
        assert [key for key, _ in script.title_page_items()] == [
            "title",
            "author",
            "draft",
        ]

    def test_iter_elements_unfolds_dual(self, script):
        """Test dual columns are yielded left then right."""
        texts = [element.plain_text for element in script.iter_elements()]
        assert texts == ["INT. HOUSE - DAY", "JOE", "Hi", "MARY", "Hey", "They leave."]

    def test_count_by_type(self, script):
        """Test dual blocks are counted as one element."""
        assert script.count_by_type() == {
            "sceneHeading": 1,
            "dualDialogue": 1,
            "action": 1,
        }

    def test_to_dict_styles(self):
        """Test per-type default styles are serialized by value."""
        script = Script(styles={ElementType.CHARACTER: [Style.BOLD]})
        assert script.to_dict()["styles"] == {"character": ["bold"]}


class TestElementBuilder:
    """Test the append-only element sequence."""

    @staticmethod
    def _element(element_type, text):
        return ScriptElement.text(element_type, text)

    def test_pop_until_includes_target(self):
        """Test popping stops after the latest element of the type."""
        builder = ElementBuilder()
        builder.append(self._element(ElementType.ACTION, "A"))
        builder.append(self._element(ElementType.CHARACTER, "JOE"))
        builder.append(self._element(ElementType.DIALOGUE, "Hi"))
        builder.append(self._element(ElementType.PARENTHETICAL, "(beat)"))

        popped = builder.pop_until(ElementType.CHARACTER)

        assert [e.plain_text for e in popped] == ["JOE", "Hi", "(beat)"]
        assert [e.plain_text for e in builder.build()] == ["A"]

    def test_pop_until_without_target_empties(self):
        """Test popping runs to the start when the type never appears."""
        builder = ElementBuilder()
        builder.append(self._element(ElementType.ACTION, "A"))
        builder.append(self._element(ElementType.ACTION, "B"))

        popped = builder.pop_until(ElementType.CHARACTER)

        assert [e.plain_text for e in popped] == ["A", "B"]
        assert len(builder) == 0

    def test_pop_until_stops_before_dual(self):
        """Test dual blocks are never popped."""
        builder = ElementBuilder()
        builder.append(self._element(ElementType.CHARACTER, "BOB"))
        builder.append(ScriptElement.dual())
        builder.append(self._element(ElementType.DIALOGUE, "Hi"))

        popped = builder.pop_until(ElementType.CHARACTER)

        assert [e.plain_text for e in popped] == ["Hi"]
        assert builder.last().is_dual

    def test_last(self):
        """Test last element access."""
        builder = ElementBuilder()
        assert builder.last() is None
        element = self._element(ElementType.ACTION, "A")
        builder.append(element)
        assert builder.last() is element

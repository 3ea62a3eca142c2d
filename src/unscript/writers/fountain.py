"""Fountain writer.

Output is written so that reading it back yields the same elements: lines
whose shape would be misread get a force marker (``!``, ``@``, ``.`` or
``>``) and literal markup characters are escaped.
"""

from __future__ import annotations

from collections.abc import Sequence

from unscript.models import ElementType, Script, ScriptElement, Style, TextElement
from unscript.parser.patterns import (
    is_character_cue,
    is_note,
    is_scene_heading,
    is_transition,
)
from unscript.writers.base import ScriptWriter, register_writer

# Emitted in this order when several styles toggle at one position
STYLE_MARKERS: tuple[tuple[Style, str], ...] = (
    (Style.BOLD, "**"),
    (Style.ITALIC, "*"),
    (Style.UNDERLINE, "_"),
)
ESCAPED_CHARS = frozenset("*_\\")

# First characters that trigger a forced or skipped line when unescaped
RESERVED_LEADERS = frozenset("!@.>#=[/")
DUAL_CUE_SUFFIX = " ^"

# Elements written directly below the previous line
ADJACENT_TYPES = frozenset({ElementType.DIALOGUE, ElementType.PARENTHETICAL})


def escape_text(text: str) -> str:
    return "".join("\\" + char if char in ESCAPED_CHARS else char for char in text)


def render_runs(runs: Sequence[TextElement]) -> str:
    """Render runs as marked-up Fountain text.

    Only the styles that change between neighbouring runs are toggled, and
    everything still open is closed at the end of the line.
    """
    parts: list[str] = []
    active: frozenset[Style] = frozenset()
    for run in runs:
        if not run.text:
            continue
        parts.append(_toggle(active ^ run.styles))
        parts.append(escape_text(run.text))
        active = run.styles
    parts.append(_toggle(active))
    return "".join(parts)


def _toggle(styles: frozenset[Style]) -> str:
    return "".join(marker for style, marker in STYLE_MARKERS if style in styles)


def _escape_at(line: str, index: int) -> str:
    return line[:index] + "\\" + line[index:]


def _guard_inside_dialogue(line: str, element_type: ElementType) -> str:
    """Escape a dialogue or parenthetical line that would not read as one."""
    if not line:
        return "\\"
    stripped = line.lstrip()
    if stripped:
        index = len(line) - len(stripped)
        leader = stripped[0]
        if leader in RESERVED_LEADERS or (
            leader == "(" and element_type is ElementType.DIALOGUE
        ):
            line = _escape_at(line, index)
    if is_transition(line):
        line = _escape_at(line, len(line) - 1)
    return line


def _reads_as_action(line: str, followed_by_text: bool) -> bool:
    return not (
        not line
        or line[0] in RESERVED_LEADERS
        or is_note(line)
        or is_scene_heading(line)
        or is_transition(line)
        or (followed_by_text and is_character_cue(line))
    )


def _reads_as_character(line: str, followed_by_text: bool) -> bool:
    return (
        followed_by_text
        and is_character_cue(line)
        and line[0] not in RESERVED_LEADERS
        and "^" not in line
        and not is_note(line)
        and not is_scene_heading(line)
        and not is_transition(line)
    )


def _reads_as_transition(line: str) -> bool:
    return (
        is_transition(line)
        and line[0] not in RESERVED_LEADERS
        and not is_note(line)
        and not is_scene_heading(line)
    )


def format_line(
    element: ScriptElement,
    followed_by_text: bool = False,
    dual_cue: bool = False,
    inside_dialogue: bool = False,
) -> str:
    """Render one non-dual element as a single Fountain line.

    Args:
        element: Element to render
        followed_by_text: Whether the next line follows without a blank line
        dual_cue: Whether this is the character cue opening a right column
        inside_dialogue: Whether the line sits in an open dialogue block,
            where unforced action and headings would read as dialogue

    Returns:
        Fountain line without a line break
    """
    line = render_runs(element.text_elements)
    element_type = element.type

    if element_type is ElementType.ACTION:
        if element.centered:
            return f"> {line} <"
        if inside_dialogue or not _reads_as_action(line, followed_by_text):
            return "!" + line
        return line

    if element_type is ElementType.CHARACTER:
        if (
            dual_cue
            and _reads_as_character(line, followed_by_text)
            and is_character_cue(line + DUAL_CUE_SUFFIX)
        ):
            return line + DUAL_CUE_SUFFIX
        return line if _reads_as_character(line, followed_by_text) else "@" + line

    if element_type is ElementType.SCENE_HEADING:
        if inside_dialogue or not is_scene_heading(line):
            return "." + line
        return line

    if element_type is ElementType.TRANSITION:
        return line if _reads_as_transition(line) else "> " + line

    return _guard_inside_dialogue(line, element_type)


@register_writer
class FountainWriter(ScriptWriter):
    """Write scripts as Fountain plain text."""

    format_name = "fountain"
    extension = ".fountain"
    media_type = "text/plain"

    def write(self, script: Script) -> bytes:
        return self.render(script).encode("utf-8")

    def render(self, script: Script) -> str:
        """Render a script as Fountain text with a leading title page."""
        body: list[str] = []
        elements = script.elements
        attached = self.attached_to_dialogue(elements)
        for index, element in enumerate(elements):
            following = elements[index + 1] if index + 1 < len(elements) else None
            followed_by_text = following is not None and (
                following.type in ADJACENT_TYPES or attached[index + 1]
            )

            if element.is_dual:
                body.append("")
                body.extend(self._column(element.left))
                body.append("")
                body.extend(self._column(element.right, dual=True))
                continue

            if element.type not in ADJACENT_TYPES and not attached[index]:
                body.append("")
            body.append(
                format_line(element, followed_by_text, inside_dialogue=attached[index])
            )

        title = self.render_title_page(script)
        return title + "\n\n" + "\n".join(body).lstrip("\n") + "\n"

    @staticmethod
    def attached_to_dialogue(elements: Sequence[ScriptElement]) -> list[bool]:
        """Flag elements written inside a dialogue block without a blank line.

        These are elements other than cues and dialogue that interrupt a
        dialogue block which resumes after them. A blank line before them
        would close the block, so the dialogue after would read as action.
        """
        resumes = [False] * len(elements)
        dialogue_follows = False
        for index in range(len(elements) - 1, -1, -1):
            element = elements[index]
            if element.is_dual or element.type is ElementType.CHARACTER:
                dialogue_follows = False
            elif element.type in ADJACENT_TYPES:
                dialogue_follows = True
            else:
                resumes[index] = dialogue_follows

        attached = []
        inside_dialogue = False
        for element, resumed in zip(elements, resumes, strict=True):
            if (
                element.is_dual
                or element.type is ElementType.CHARACTER
                or element.type in ADJACENT_TYPES
            ):
                inside_dialogue = True
                attached.append(False)
            else:
                inside_dialogue = inside_dialogue and resumed
                attached.append(inside_dialogue)
        return attached

    @staticmethod
    def _column(elements: Sequence[ScriptElement], dual: bool = False) -> list[str]:
        lines = []
        for index, element in enumerate(elements):
            following = elements[index + 1] if index + 1 < len(elements) else None
            lines.append(
                format_line(
                    element,
                    followed_by_text=following is not None,
                    dual_cue=dual and index == 0,
                )
            )
        return lines

    @staticmethod
    def render_title_page(script: Script) -> str:
        """Title page as ``Key: value`` lines, title and author first."""
        lines = []
        for key, value in script.title_page_items():
            label = key.title()
            if "\n" in value:
                lines.append(f"{label}:")
                lines.extend(f"    {part}" for part in value.split("\n"))
            else:
                lines.append(f"{label}: {value}" if value else f"{label}:")
        return "\n".join(lines)


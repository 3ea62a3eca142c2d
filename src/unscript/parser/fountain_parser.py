"""Fountain screenplay parser.

The body is classified one line at a time by a small state machine. The
state lives in a :class:`FountainState` owned by a single parse, so parsers
can be shared freely between documents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from unscript.config import UnscriptSettings, get_logger, get_settings
from unscript.exceptions import ParseError
from unscript.models import (
    ElementBuilder,
    ElementType,
    Script,
    ScriptElement,
    TextElement,
    coalesce_runs,
    default_title_page,
)
from unscript.parser.markup import parse_markup
from unscript.parser.patterns import (
    closes_boneyard,
    is_blank_token,
    is_centered,
    is_character_cue,
    is_note,
    is_page_break,
    is_parenthetical,
    is_scene_heading,
    is_transition,
    opens_boneyard,
)

logger = get_logger(__name__)

# Splitting keeps the extra line breaks of a run as their own token, so a
# blank line shows up as a token made of line break characters.
LINE_SPLIT = re.compile(r"[\n\r]([\n\r]*)")
BLANK_LINE_SPLIT = re.compile(r"[\n\r]{2,}")
TITLE_KEY = re.compile(r"^(\S[^:]+):\s*(.*)$")
DUAL_MARKER = re.compile(r"\s*\^\s*")


@dataclass
class FountainState:
    """Document-wide classification state for one parse."""

    elements: ElementBuilder = field(default_factory=ElementBuilder)
    inside_boneyard: bool = False
    inside_dialogue_block: bool = False
    inside_dual_dialogue_block: bool = False
    has_blank_line_before: bool = True


def decode_text(data: bytes, source: str) -> str:
    """Decode screenplay bytes as UTF-8, tolerating a byte order mark."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(
            message=f"Failed to decode {source} as UTF-8 text",
            hint="Re-save the file with UTF-8 encoding.",
            details={"source": source, "position": e.start},
        ) from e


def _strip_leading(runs: list[TextElement]) -> list[TextElement]:
    """Remove a one-character marker and following whitespace."""
    first = runs[0]
    return coalesce_runs([first.with_text(first.text[1:].lstrip()), *runs[1:]])


def _strip_trailing(runs: list[TextElement]) -> list[TextElement]:
    """Remove a one-character marker and preceding whitespace."""
    last = runs[-1]
    return coalesce_runs([*runs[:-1], last.with_text(last.text[:-1].rstrip())])


class FountainParser:
    """Parse Fountain text into a :class:`Script`."""

    def __init__(self, settings: UnscriptSettings | None = None) -> None:
        """Initialize the fountain parser.

        Args:
            settings: Settings supplying the default author
        """
        self.settings = settings or get_settings()

    def extract_title_page(
        self, content: str, title: str | None = None
    ) -> tuple[dict[str, str], str]:
        """Split the leading ``Key: value`` block off the document.

        The block ends at the first blank line. Keys are lower-cased and a key
        with no value collects the following lines until the next key.

        Args:
            content: Trimmed Fountain text
            title: Fallback title, usually the file name stem

        Returns:
            Tuple of (title page mapping, remaining body text)
        """
        title_page = default_title_page(title, self.settings.default_author)
        top = BLANK_LINE_SPLIT.split(content, maxsplit=1)[0]

        is_title_page = False
        open_key: str | None = None
        open_lines: list[str] = []
        for line in LINE_SPLIT.split(top):
            if not line:
                continue
            matched = TITLE_KEY.match(line)
            if matched:
                is_title_page = True
                if open_key:
                    title_page[open_key] = "\n".join(open_lines)
                    open_key = None
                    open_lines = []

                key, value = matched.group(1).lower(), matched.group(2).strip()
                if key == "authors":
                    key = "author"
                if value:
                    title_page[key] = value
                else:
                    open_key = key
            elif open_key:
                open_lines.append(line.strip())

        if open_key:
            title_page[open_key] = "\n".join(open_lines)

        if is_title_page:
            content = content[len(top) :]
        return title_page, content

    def classify_line(
        self, line: str, next_line: str | None, state: FountainState
    ) -> None:
        """Classify one line, appending any resulting element to the state.

        Args:
            line: Line (or blank-line token) to classify
            next_line: The token after it, if any
            state: Classification state of the running parse
        """
        if not line:
            return

        runs = parse_markup(line)
        first = line[0]

        if first == "!":
            self._emit(state, ElementType.ACTION, _strip_leading(runs))
            return

        if first == "@":
            self._emit(state, ElementType.CHARACTER, _strip_leading(runs))
            state.inside_dialogue_block = True
            return

        if is_blank_token(line):
            state.inside_dialogue_block = False
            state.inside_dual_dialogue_block = False
            state.has_blank_line_before = True
            return

        # Boneyard, page breaks, synopses, notes and sections are not rendered
        if opens_boneyard(line):
            state.inside_boneyard = True
        if state.inside_boneyard:
            if closes_boneyard(line):
                state.inside_boneyard = False
            return

        if is_page_break(line):
            state.has_blank_line_before = False
            return

        if first == "=" or first == "#" or is_note(line):
            return

        if len(line) > 1 and first == "." and line[1] != ".":
            self._emit(state, ElementType.SCENE_HEADING, _strip_leading(runs))
            return

        if state.has_blank_line_before and is_scene_heading(line):
            self._emit(state, ElementType.SCENE_HEADING, runs)
            return

        if is_transition(line):
            if first == ">":
                runs = _strip_leading(runs)
            self._emit(state, ElementType.TRANSITION, runs)
            return

        if len(line) > 1 and first == ">":
            runs = _strip_leading(runs)
            if line.endswith("<"):
                self._emit(
                    state, ElementType.ACTION, _strip_trailing(runs), centered=True
                )
            else:
                self._emit(state, ElementType.TRANSITION, runs)
            return

        if (
            state.has_blank_line_before
            and is_character_cue(line)
            and next_line is not None
            and not is_blank_token(next_line)
        ):
            if "^" in line:
                self._start_dual_dialogue(state, runs)
            else:
                self._emit(state, ElementType.CHARACTER, runs)
            state.inside_dialogue_block = True
            return

        if state.inside_dialogue_block:
            if not state.has_blank_line_before and is_parenthetical(line):
                element_type = ElementType.PARENTHETICAL
            else:
                element_type = ElementType.DIALOGUE

            element = ScriptElement.text(element_type, runs)
            block = state.elements.last()
            if state.inside_dual_dialogue_block and block is not None and block.is_dual:
                block.right.append(element)
                state.has_blank_line_before = False
            else:
                self._append(state, element)
            return

        if is_centered(line):
            runs = _strip_trailing(_strip_leading(runs))
            self._emit(state, ElementType.ACTION, runs, centered=True)
            return

        self._emit(state, ElementType.ACTION, runs)

    def _emit(
        self,
        state: FountainState,
        element_type: ElementType,
        runs: list[TextElement],
        centered: bool = False,
    ) -> None:
        self._append(state, ScriptElement.text(element_type, runs, centered))

    @staticmethod
    def _append(state: FountainState, element: ScriptElement) -> None:
        state.elements.append(element)
        state.has_blank_line_before = False

    @staticmethod
    def _start_dual_dialogue(state: FountainState, runs: list[TextElement]) -> None:
        """Open a dual dialogue block whose right column starts with this cue.

        Everything emitted since the previous character cue moves into the
        left column.
        """
        cue_runs = coalesce_runs(
            run.with_text(DUAL_MARKER.sub("", run.text, count=1)) for run in runs
        )
        cue = ScriptElement.text(ElementType.CHARACTER, cue_runs)
        left = state.elements.pop_until(ElementType.CHARACTER)
        state.elements.append(ScriptElement.dual(left=left, right=[cue]))
        state.inside_dual_dialogue_block = True
        state.has_blank_line_before = False

    def parse(self, content: str, title: str | None = None) -> Script:
        """Parse Fountain content into a script.

        Args:
            content: Raw Fountain text
            title: Fallback title when the title page has none

        Returns:
            Parsed Script
        """
        content = content.replace("\r\n", "\n").strip()
        title_page, body = self.extract_title_page(content, title)

        lines = LINE_SPLIT.split(body)
        state = FountainState()
        for index, line in enumerate(lines):
            next_line = lines[index + 1] if index + 1 < len(lines) else None
            self.classify_line(line, next_line, state)

        elements = state.elements.build()
        logger.debug(
            "Parsed Fountain document",
            title=title_page.get("title"),
            lines=len(lines),
            elements=len(elements),
        )
        return Script(title_page=title_page, elements=elements)

    def parse_bytes(self, data: bytes, title: str | None = None) -> Script:
        """Decode and parse Fountain bytes."""
        return self.parse(decode_text(data, title or "Fountain document"), title)

    def parse_file(self, file_path: Path) -> Script:
        """Parse a Fountain file, titled after its file name by default.

        Args:
            file_path: Path to the Fountain file

        Returns:
            Parsed Script
        """
        logger.debug(f"Parsing fountain file: {file_path}")
        return self.parse_bytes(file_path.read_bytes(), title=file_path.stem)

"""Screenplay structure recovery from positioned PDF text.

A PDF carries no semantic tags, only glyph runs at page coordinates. Lines
are rebuilt from same-baseline fragments, the three most common x offsets
are taken as the action, dialogue and character margins, and every line is
scored against the six text element types by five heuristic families:

====  ================  ===============================================
row   family            evidence
====  ================  ===============================================
0     margin            which reference margin the line starts at
1     content           shape of the text (cue, paren, slugline, "TO:")
2     vertical gap      blank line above or not
3     previous type     what the line before was classified as
4     dual dialogue     inside, or starting, a right-hand column
====  ================  ===============================================

Each family marks the types it supports with 1. The marks are scaled by a
hand-tuned weight matrix, summed per type, and the best type wins, ties
going to the type declared first in :class:`ElementType`.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from pydantic import BaseModel, Field, field_validator

from unscript.config import UnscriptSettings, get_logger, get_settings
from unscript.models import (
    TEXT_TYPES,
    ElementBuilder,
    ElementType,
    Script,
    ScriptElement,
    Style,
    TextElement,
    coalesce_runs,
    default_title_page,
)
from unscript.parser.patterns import (
    AUTHOR_MARKER,
    is_character_cue,
    is_parenthetical,
    is_scene_heading,
    is_transition,
    strip_scene_numbers,
)

logger = get_logger(__name__)

MARGIN, CONTENT, GAP, PREVIOUS, DUAL = range(5)
ACTION, CHARACTER, DIALOGUE, PARENTHETICAL, SCENE_HEADING, TRANSITION = range(6)

# Hand-selected by trial and error on conventionally formatted scripts
DEFAULT_WEIGHTS: list[list[float]] = [
    [2, 2, 2, 2, 2, 2],
    [1, 1, 1, 2, 8, 2],
    [1, 1, 1, 1, 1, 1],
    [1, 1, 1, 1, 1, 1],
    [1, 5, 5, 5, 1, 1],
]


@dataclass(frozen=True)
class GlyphFragment:
    """A run of text sharing one font and baseline.

    ``y`` is the baseline measured up from the bottom of the page.
    """

    text: str
    font_name: str
    x: float
    y: float
    height: float


@dataclass(frozen=True)
class StrokePath:
    """A horizontal stroke; ``y`` is measured down from the top of the page."""

    x0: float
    y: float
    x1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0


@dataclass
class PageContent:
    """Everything the classifier needs from one PDF page."""

    fragments: list[GlyphFragment] = field(default_factory=list)
    paths: list[StrokePath] = field(default_factory=list)
    width: float = 612.0
    height: float = 792.0


Line = list[GlyphFragment]


class PdfLayoutConfig(BaseModel):
    """Geometry constants for PDF classification.

    None of these are derived; they suit monospaced pages with conventional
    screenplay margins.
    """

    trim_inches: float = Field(default=1.0, ge=0.0)
    dpi: float = Field(default=72.0, gt=0.0)
    position_error_margin: float = Field(default=10.0, gt=0.0)
    title_page_threshold: int = Field(default=20, ge=0)
    underline_char_width: float = Field(default=7.0, gt=0.0)
    weights: list[list[float]] = Field(
        default_factory=lambda: [list(row) for row in DEFAULT_WEIGHTS]
    )

    @field_validator("weights")
    @classmethod
    def check_weights_shape(cls, v: list[list[float]]) -> list[list[float]]:
        """Require one row per heuristic family and one column per type."""
        if len(v) != 5 or any(len(row) != 6 for row in v):
            raise ValueError("weights must be a 5x6 matrix")
        return v

    @classmethod
    def from_settings(cls, settings: UnscriptSettings) -> PdfLayoutConfig:
        return cls(
            trim_inches=settings.pdf_trim_inches,
            position_error_margin=settings.pdf_position_error_margin,
            title_page_threshold=settings.pdf_title_page_threshold,
            underline_char_width=settings.pdf_underline_char_width,
        )


@dataclass(frozen=True)
class ReferenceMargins:
    """Left x offsets of action, dialogue and character lines."""

    action: float
    dialogue: float
    character: float


@dataclass
class PdfLayoutState:
    """Sequential classification state, carried across page boundaries."""

    elements: ElementBuilder = field(default_factory=ElementBuilder)
    previous_y: float | None = None
    previous_element: ScriptElement | None = None
    inside_dual_dialogue: bool = False
    last_character_y: float | None = None


def _mode(values: Sequence[float], default: float) -> float:
    return Counter(values).most_common(1)[0][0] if values else default


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def line_text(line: Line) -> str:
    return "".join(fragment.text for fragment in line)


def font_styles(font_name: str) -> frozenset[Style]:
    """Bold and italic as implied by a font name."""
    name = font_name.lower()
    styles = set()
    if "italic" in name or "oblique" in name:
        styles.add(Style.ITALIC)
    if "bold" in name:
        styles.add(Style.BOLD)
    return frozenset(styles)


class PdfLayoutClassifier:
    """Turn extracted PDF pages into a :class:`Script`."""

    def __init__(
        self,
        config: PdfLayoutConfig | None = None,
        settings: UnscriptSettings | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            config: Geometry constants; derived from settings when omitted
            settings: Settings supplying the default author and PDF constants
        """
        self.settings = settings or get_settings()
        self.config = config or PdfLayoutConfig.from_settings(self.settings)

    @property
    def _tolerance(self) -> float:
        return self.config.position_error_margin

    def trim(
        self, fragments: Sequence[GlyphFragment], width: float, height: float
    ) -> list[GlyphFragment]:
        """Drop fragments lying in the page margin band."""
        band = self.config.trim_inches * self.config.dpi
        tolerance = self._tolerance
        return [
            fragment
            for fragment in fragments
            if not (
                fragment.y > height - band + tolerance
                or fragment.x > width - band + tolerance
                or fragment.y < band - tolerance
                or fragment.x < band - tolerance
            )
        ]

    @staticmethod
    def collapse(fragments: Sequence[GlyphFragment]) -> list[Line]:
        """Join adjacent fragments into lines.

        A baseline change starts a new line. A font change on the same
        baseline starts a new fragment within the line, so style boundaries
        survive.
        """
        lines: list[Line] = []
        line: Line = []
        base: GlyphFragment | None = None
        for fragment in fragments:
            if base is None:
                base = fragment
                continue
            if fragment.y != base.y:
                line.append(base)
                lines.append(line)
                line = []
                base = fragment
                continue
            if fragment.font_name != base.font_name:
                line.append(base)
                base = fragment
                continue
            base = replace(base, text=base.text + fragment.text)

        if base is not None:
            line.append(base)
            lines.append(line)
        return lines

    @staticmethod
    def reference_margins(
        fragments: Sequence[GlyphFragment],
    ) -> ReferenceMargins | None:
        """Action, dialogue and character margins, or None if undefined.

        The three most frequent rounded x offsets are taken, sorted left to
        right. Ties prefer the smaller offset so fragment order is irrelevant.
        """
        counts = Counter(_round_half_up(fragment.x) for fragment in fragments)
        if len(counts) < 3:
            return None
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        action, dialogue, character = sorted(x for x, _ in ranked[:3])
        return ReferenceMargins(action, dialogue, character)

    @staticmethod
    def read_title_page(lines: Sequence[Line], title_page: dict[str, str]) -> None:
        """Take the first line as title and the line after a by-line as author."""
        if not lines:
            return
        title_page["title"] = line_text(lines[0]).strip()
        is_author = False
        for line in lines:
            text = line_text(line).strip()
            if is_author:
                title_page["author"] = text
                is_author = False
                continue
            if AUTHOR_MARKER.search(text):
                is_author = True

    def classify(
        self, pages: Sequence[PageContent], title: str | None = None
    ) -> Script:
        """Classify every page of a document, in order.

        Args:
            pages: Extracted page contents
            title: Fallback title, usually the file name stem

        Returns:
            Parsed Script; empty when the PDF has no text
        """
        title_page = default_title_page(title, self.settings.default_author)
        width = _mode([page.width for page in pages], PageContent.width)
        height = _mode([page.height for page in pages], PageContent.height)

        trimmed = [self.trim(page.fragments, width, height) for page in pages]
        body = [
            (page, fragments, self.collapse(fragments))
            for page, fragments in zip(pages, trimmed, strict=True)
        ]

        # Threshold counts collapsed lines, not raw fragments
        if body and len(body[0][2]) < self.config.title_page_threshold:
            self.read_title_page(body[0][2], title_page)
            body = body[1:]

        margins = self.reference_margins(
            [fragment for _, fragments, _ in body for fragment in fragments]
        )
        if margins is None and any(lines for _, _, lines in body):
            logger.warning(
                "PDF layout is degenerate, classifying every line as action",
                title=title_page["title"],
            )
        logger.debug("Reference margins", margins=margins, pages=len(body))

        state = PdfLayoutState()
        for page, _, lines in body:
            state.previous_y = None
            for line in lines:
                self.classify_line(line, page, margins, state)

        elements = state.elements.build()
        logger.debug(
            "Classified PDF document",
            title=title_page["title"],
            elements=len(elements),
        )
        return Script(title_page=title_page, elements=elements)

    def classify_line(
        self,
        line: Line,
        page: PageContent,
        margins: ReferenceMargins | None,
        state: PdfLayoutState,
    ) -> None:
        """Classify one line and emit, merge or re-home the result."""
        lead = line[0]
        tolerance = self._tolerance
        has_blank_line_before = (
            state.previous_y is None
            or state.previous_y - lead.y >= lead.height + tolerance
        )
        if has_blank_line_before:
            state.inside_dual_dialogue = False

        if margins is None:
            element_type = ElementType.ACTION
        else:
            scores = self.score_line(line, margins, state, has_blank_line_before)
            element_type = self.pick_type(scores)

        runs = self.style_line(line, page)
        if element_type is ElementType.SCENE_HEADING:
            runs = self._strip_scene_numbers(runs)
        if element_type is ElementType.CHARACTER:
            state.last_character_y = lead.y

        previous = state.previous_element
        if (
            previous is not None
            and previous.type is element_type
            and not has_blank_line_before
            and state.previous_y is not None
            and state.previous_y - lead.y < lead.height + tolerance
        ):
            last = previous.text_elements[-1]
            previous.text_elements = coalesce_runs(
                [*previous.text_elements[:-1], last.with_text(last.text + " "), *runs]
            )
        else:
            element = ScriptElement.text(element_type, runs)
            block = state.elements.last()
            if state.inside_dual_dialogue and block is not None and block.is_dual:
                block.right.append(element)
            else:
                state.elements.append(element)
            state.previous_element = element

        state.previous_y = lead.y

    def score_line(
        self,
        line: Line,
        margins: ReferenceMargins,
        state: PdfLayoutState,
        has_blank_line_before: bool,
    ) -> list[list[int]]:
        """Build the 5x6 heuristic matrix for one line.

        Detecting the start of a right-hand dual dialogue column rewrites the
        already emitted left column as a side effect.
        """
        scores = [[0] * 6 for _ in range(5)]
        lead = line[0]
        x, y = lead.x, lead.y
        tolerance = self._tolerance

        if abs(x - margins.action) < tolerance:
            scores[MARGIN][ACTION] = 1
            scores[MARGIN][SCENE_HEADING] = 1
        elif abs(x - margins.dialogue) < tolerance:
            scores[MARGIN][DIALOGUE] = 1
        elif abs(x - margins.character) < tolerance:
            scores[MARGIN][CHARACTER] = 1
        elif margins.dialogue - tolerance < x < margins.character + tolerance:
            scores[MARGIN][PARENTHETICAL] = 1
        elif x > margins.character:
            scores[MARGIN][TRANSITION] = 1

        content = line_text(line)
        heading = is_scene_heading(content)
        scores[CONTENT][CHARACTER] = int(is_character_cue(content))
        scores[CONTENT][PARENTHETICAL] = int(is_parenthetical(content))
        scores[CONTENT][SCENE_HEADING] = int(heading)
        scores[CONTENT][ACTION] = int(not heading)
        scores[CONTENT][TRANSITION] = int(is_transition(content))

        # The first line of a page has no measurable gap
        if state.previous_y is not None:
            if has_blank_line_before:
                for column in (CHARACTER, SCENE_HEADING, TRANSITION):
                    scores[GAP][column] = 1
            else:
                for column in (ACTION, DIALOGUE, PARENTHETICAL):
                    scores[GAP][column] = 1

        previous = state.previous_element
        if previous is None:
            return scores

        if previous.type is ElementType.ACTION:
            if not has_blank_line_before:
                scores[PREVIOUS][ACTION] = 1
        elif previous.type is ElementType.DIALOGUE:
            if not has_blank_line_before:
                scores[PREVIOUS][DIALOGUE] = 1
        elif previous.type in (ElementType.CHARACTER, ElementType.PARENTHETICAL):
            scores[PREVIOUS][DIALOGUE] = 1
            scores[PREVIOUS][PARENTHETICAL] = 1

        if state.inside_dual_dialogue:
            scores[DUAL][DIALOGUE] = 1
            scores[DUAL][PARENTHETICAL] = 1
        elif self._starts_right_column(x, y, margins, state):
            self._open_dual_dialogue(state)
            scores[DUAL][CHARACTER] = 1

        return scores

    def pick_type(self, scores: list[list[int]]) -> ElementType:
        """Weighted column sums; the first of the best columns wins."""
        weights = self.config.weights
        sums = [
            sum(scores[row][column] * weights[row][column] for row in range(5))
            for column in range(6)
        ]
        best = max(range(6), key=lambda column: (sums[column], -column))
        return TEXT_TYPES[best]

    def _starts_right_column(
        self, x: float, y: float, margins: ReferenceMargins, state: PdfLayoutState
    ) -> bool:
        """A line right of the cue margin that climbs back up to the last cue."""
        previous = state.previous_element
        tolerance = self._tolerance
        return (
            previous is not None
            and previous.type is ElementType.ACTION
            and x > margins.character + tolerance
            and state.previous_y is not None
            and y > state.previous_y
            and state.last_character_y is not None
            and abs(state.last_character_y - y) < tolerance
        )

    @staticmethod
    def _open_dual_dialogue(state: PdfLayoutState) -> None:
        """Move output back to the last cue into a new dual dialogue block.

        The left column's last line was misread as action; it becomes
        dialogue.
        """
        previous = state.previous_element
        left = []
        for element in state.elements.pop_until(ElementType.CHARACTER):
            if element is previous:
                element = element.retyped(ElementType.DIALOGUE)
                state.previous_element = element
            left.append(element)
        state.elements.append(ScriptElement.dual(left=left))
        state.inside_dual_dialogue = True

    def style_line(self, line: Line, page: PageContent) -> list[TextElement]:
        """Runs for a line: font-derived bold/italic plus stroked underlines."""
        runs: list[TextElement] = []
        for fragment in line:
            base = font_styles(fragment.font_name)
            underlined = self._underlined_chars(fragment, page)
            if not underlined:
                runs.append(TextElement(fragment.text, base))
                continue
            for index, char in enumerate(fragment.text):
                styles = base | {Style.UNDERLINE} if index in underlined else base
                runs.append(TextElement(char, styles))
        return coalesce_runs(runs)

    def _underlined_chars(self, fragment: GlyphFragment, page: PageContent) -> set[int]:
        """Character indexes of a fragment covered by strokes just below it.

        Stroke extents are mapped to characters with a fixed glyph width.
        """
        char_width = self.config.underline_char_width
        tolerance = self._tolerance
        covered: set[int] = set()
        for path in page.paths:
            underline_y = page.height - path.y
            if not (underline_y < fragment.y and fragment.y - underline_y < tolerance):
                continue
            offset = _round_half_up((path.x0 - fragment.x) / char_width)
            count = _round_half_up(path.width / char_width)
            start = max(offset, 0)
            end = min(offset + count, len(fragment.text))
            covered.update(range(start, end))
        return covered

    @staticmethod
    def _strip_scene_numbers(runs: list[TextElement]) -> list[TextElement]:
        """Remove printed scene numbers from both ends of a heading.

        Only the outer edge of the first and last run is touched, so spaces
        between runs of different fonts survive.
        """
        if len(runs) < 2:
            return coalesce_runs(
                [run.with_text(strip_scene_numbers(run.text)) for run in runs]
            )
        first, *middle, last = runs
        return coalesce_runs(
            [
                first.with_text(strip_scene_numbers(first.text, trailing=False)),
                *middle,
                last.with_text(strip_scene_numbers(last.text, leading=False)),
            ]
        )

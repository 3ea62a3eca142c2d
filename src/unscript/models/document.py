"""Canonical screenplay document model.

Every reader builds a :class:`Script` and every writer consumes one. A script
is a title page, an ordered list of :class:`ScriptElement` and an optional
per-type default style list.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Style(str, Enum):
    """Inline text styles carried by a text run."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"

    @classmethod
    def parse(cls, names: Iterable[str]) -> frozenset[Style]:
        """Map style names to styles, silently dropping unknown ones."""
        known = {style.value: style for style in cls}
        return frozenset(
            known[name.strip().lower()]
            for name in names
            if name.strip().lower() in known
        )


class ElementType(str, Enum):
    """Screenplay element types.

    The declaration order of the first six members is the tie-break order
    used when scoring PDF lines.
    """

    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    SCENE_HEADING = "sceneHeading"
    TRANSITION = "transition"
    DUAL_DIALOGUE = "dualDialogue"


# Element types that carry text runs
TEXT_TYPES: tuple[ElementType, ...] = (
    ElementType.ACTION,
    ElementType.CHARACTER,
    ElementType.DIALOGUE,
    ElementType.PARENTHETICAL,
    ElementType.SCENE_HEADING,
    ElementType.TRANSITION,
)


@dataclass(frozen=True)
class TextElement:
    """A run of text sharing exactly one style set."""

    text: str = ""
    styles: frozenset[Style] = frozenset()

    def with_text(self, text: str) -> TextElement:
        """Return a copy of this run holding different text."""
        return TextElement(text, self.styles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "styles": sorted(style.value for style in self.styles),
        }


def coalesce_runs(runs: Iterable[TextElement]) -> list[TextElement]:
    """Merge neighbouring runs with equal style sets into maximal runs.

    Empty runs are dropped unless nothing else is left.
    """
    merged: list[TextElement] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].styles == run.styles:
            merged[-1] = merged[-1].with_text(merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged or [TextElement()]


@dataclass
class ScriptElement:
    """Tagged screenplay element.

    Non-dual elements carry ``text_elements`` and ``centered``. A dual
    dialogue element instead carries ``left`` and ``right`` columns of
    non-dual elements. Use :meth:`text` and :meth:`dual` to build them.
    """

    type: ElementType
    text_elements: list[TextElement] = field(default_factory=list)
    centered: bool = False
    left: list[ScriptElement] = field(default_factory=list)
    right: list[ScriptElement] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.type = ElementType(self.type)
        if self.is_dual:
            if self.text_elements or self.centered:
                raise ValueError("Dual dialogue elements cannot carry text runs")
            for child in (*self.left, *self.right):
                if child.is_dual:
                    raise ValueError("Dual dialogue elements cannot be nested")
        else:
            if self.left or self.right:
                raise ValueError(f"{self.type.value} elements cannot have columns")
            if not self.text_elements:
                self.text_elements = [TextElement()]

    @classmethod
    def text(
        cls,
        type: ElementType | str,
        text_elements: Iterable[TextElement] | str,
        centered: bool = False,
    ) -> ScriptElement:
        """Build a non-dual element from runs or from a plain string."""
        if isinstance(text_elements, str):
            runs = [TextElement(text_elements)]
        else:
            runs = list(text_elements)
        return cls(type=ElementType(type), text_elements=runs, centered=centered)

    @classmethod
    def dual(
        cls,
        left: Iterable[ScriptElement] = (),
        right: Iterable[ScriptElement] = (),
    ) -> ScriptElement:
        """Build a dual dialogue element from its two columns."""
        return cls(
            type=ElementType.DUAL_DIALOGUE, left=list(left), right=list(right)
        )

    @property
    def is_dual(self) -> bool:
        return self.type is ElementType.DUAL_DIALOGUE

    @property
    def plain_text(self) -> str:
        """Concatenated text of all runs, styles discarded."""
        return "".join(run.text for run in self.text_elements)

    def retyped(self, type: ElementType) -> ScriptElement:
        """Return a copy of this text element with a different type."""
        return ScriptElement.text(type, self.text_elements, self.centered)

    def to_dict(self) -> dict[str, Any]:
        if self.is_dual:
            return {
                "type": self.type.value,
                "left": [child.to_dict() for child in self.left],
                "right": [child.to_dict() for child in self.right],
            }
        data: dict[str, Any] = {
            "type": self.type.value,
            "text_elements": [run.to_dict() for run in self.text_elements],
        }
        if self.centered:
            data["centered"] = True
        return data


def default_title_page(
    title: str | None = None, author: str = "Anonymous"
) -> dict[str, str]:
    """Title page holding only the fallback title and author."""
    return {"title": title or "Untitled", "author": author}


@dataclass
class Script:
    """A parsed screenplay."""

    title_page: dict[str, str] = field(default_factory=default_title_page)
    elements: list[ScriptElement] = field(default_factory=list)
    styles: dict[ElementType, list[Style]] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.title_page.get("title", "Untitled")

    @property
    def author(self) -> str:
        return self.title_page.get("author", "Anonymous")

    def title_page_items(self) -> list[tuple[str, str]]:
        """Title page entries, title and author first."""
        leading = [key for key in ("title", "author") if key in self.title_page]
        rest = [key for key in self.title_page if key not in ("title", "author")]
        return [(key, self.title_page[key]) for key in (*leading, *rest)]

    def iter_elements(self) -> Iterator[ScriptElement]:
        """Yield text elements in reading order, unfolding dual columns."""
        for element in self.elements:
            if element.is_dual:
                yield from element.left
                yield from element.right
            else:
                yield element

    def count_by_type(self) -> dict[str, int]:
        """Number of elements of each type, dual blocks counted once."""
        counts: dict[str, int] = {}
        for element in self.elements:
            counts[element.type.value] = counts.get(element.type.value, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "title_page": dict(self.title_page),
            "elements": [element.to_dict() for element in self.elements],
            "styles": {
                element_type.value: [style.value for style in styles]
                for element_type, styles in self.styles.items()
            },
        }

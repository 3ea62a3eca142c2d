"""Inline Fountain emphasis markup.

``**bold**``, ``*italic*`` and ``_underline_`` toggle styles; a backslash
escapes the character after it. Styles still open at the end of the line
are discarded.
"""

from __future__ import annotations

from unscript.models import Style, TextElement
from unscript.parser.patterns import is_blank_token

ESCAPE = "\\"
DELIMITERS: tuple[tuple[str, Style], ...] = (
    ("**", Style.BOLD),
    ("*", Style.ITALIC),
    ("_", Style.UNDERLINE),
)


def parse_markup(line: str) -> list[TextElement]:
    """Split one line into style runs with the markup removed.

    Args:
        line: Raw line of Fountain text

    Returns:
        Non-empty list of runs whose texts concatenate to the unmarked line
    """
    if is_blank_token(line):
        return [TextElement(line)]

    chars: list[str] = []
    char_styles: list[set[Style]] = []
    open_at: dict[Style, int] = {}

    def toggle(style: Style) -> None:
        if style in open_at:
            for index in range(open_at.pop(style), len(chars)):
                char_styles[index].add(style)
        else:
            open_at[style] = len(chars)

    escaped = False
    position = 0
    while position < len(line):
        if not escaped:
            delimiter = next(
                (
                    (marker, style)
                    for marker, style in DELIMITERS
                    if line.startswith(marker, position)
                ),
                None,
            )
            if delimiter is not None:
                marker, style = delimiter
                toggle(style)
                position += len(marker)
                continue
            if line[position] == ESCAPE:
                escaped = True
                position += 1
                continue

        chars.append(line[position])
        char_styles.append(set())
        escaped = False
        position += 1

    return _runs(chars, char_styles)


def _runs(chars: list[str], char_styles: list[set[Style]]) -> list[TextElement]:
    """Group characters into maximal runs of equal style sets."""
    runs: list[TextElement] = []
    buffer: list[str] = []
    current: frozenset[Style] | None = None
    for char, styles in zip(chars, char_styles, strict=True):
        frozen = frozenset(styles)
        if current is not None and frozen != current:
            runs.append(TextElement("".join(buffer), current))
            buffer = []
        current = frozen
        buffer.append(char)

    if current is not None:
        runs.append(TextElement("".join(buffer), current))
    return runs or [TextElement()]

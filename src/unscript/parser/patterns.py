"""Line shape predicates shared by the Fountain and PDF classifiers.

Each predicate looks at one whole line. Case rules follow screenplay
convention: "lowercase" means the ASCII letters ``a`` to ``z``.
"""

from __future__ import annotations

import re

NEWLINE_CHARS = "\n\r"
CONT_D_SUFFIX = "(cont'd)"
AUTHOR_MARKER = re.compile(r"(written|screenplay) by", re.IGNORECASE)

_DIGITS = "0123456789"


def has_lowercase(text: str) -> bool:
    return any("a" <= char <= "z" for char in text)


def is_blank_token(line: str) -> bool:
    """True for a token holding line break characters."""
    return any(char in NEWLINE_CHARS for char in line)


def is_character_cue(line: str) -> bool:
    """No lowercase letters, optionally ending in a literal ``(cont'd)``."""
    body = line[: -len(CONT_D_SUFFIX)] if line.endswith(CONT_D_SUFFIX) else line
    return bool(body) and not has_lowercase(body)


def is_transition(line: str) -> bool:
    """No lowercase letters and ending in ``TO:``."""
    return line.endswith("TO:") and not has_lowercase(line)


def is_parenthetical(line: str) -> bool:
    return line.lstrip().startswith("(")


def is_centered(line: str) -> bool:
    """Wrapped as ``>text<`` with no inner angle brackets or line breaks."""
    inner = line[1:-1]
    return (
        len(line) > 2
        and line.startswith(">")
        and line.endswith("<")
        and not any(char in "<>\n" for char in inner)
    )


def is_note(line: str) -> bool:
    """A whole line ``[[note]]``, surrounding whitespace allowed."""
    stripped = line.strip()
    inner = stripped[2:-2]
    return (
        len(stripped) > 4
        and stripped.startswith("[[")
        and stripped.endswith("]]")
        and "]" not in inner
        and "\n" not in inner
    )


def is_page_break(line: str) -> bool:
    """Three or more ``=`` followed only by whitespace."""
    body = line.rstrip()
    return len(body) >= 3 and set(body) == {"="}


def opens_boneyard(line: str) -> bool:
    return line.startswith("/*")


def closes_boneyard(line: str) -> bool:
    return line.rstrip().endswith("*/")


def _skip_scene_numbers(line: str) -> int:
    """Index after leading runs of digits, each optionally followed by spaces."""
    index = 0
    while index < len(line) and line[index] in _DIGITS:
        while index < len(line) and line[index] in _DIGITS:
            index += 1
        while index < len(line) and line[index].isspace():
            index += 1
    return index


def _heading_prefix_end(text: str) -> int | None:
    """Length of the shortest INT./EXT./EST./I-E prefix at the start of text."""
    upper = text[:8].upper()
    for prefix in ("INT.", "EXT.", "EST."):
        if upper.startswith(prefix):
            return len(prefix)

    for head in ("INT", "I"):
        if not upper.startswith(head):
            continue
        index = len(head)
        if upper[index : index + 1] == ".":
            index += 1
        if upper[index : index + 1] != "/":
            continue
        if upper[index + 1 : index + 2] == "E":
            return index + 2
    return None


def is_scene_heading(line: str) -> bool:
    """Optional scene numbers, an INT./EXT./EST./I-E prefix, then more text.

    The prefix match is case-insensitive.
    """
    rest = line[_skip_scene_numbers(line) :]
    end = _heading_prefix_end(rest)
    if end is None:
        return False
    tail = rest[end:]
    return bool(tail) and "\n" not in tail


def strip_scene_numbers(
    text: str, leading: bool = True, trailing: bool = True
) -> str:
    """Drop scene-number tokens from the chosen ends, keeping the inner core.

    Text made of nothing but numbers only loses whitespace at those ends.
    """
    number_chars = _DIGITS + " \t\n\r\f\v"
    core = text
    if leading:
        core = core.lstrip(number_chars)
    if trailing:
        core = core.rstrip(number_chars)
    if core:
        return core
    if leading:
        text = text.lstrip()
    return text.rstrip() if trailing else text

"""Append-only element sequence used while a document is being parsed."""

from __future__ import annotations

from unscript.models.document import ElementType, ScriptElement


class ElementBuilder:
    """Growing list of emitted elements.

    Elements are only appended, except through :meth:`pop_until`, which
    undoes the most recent emissions so they can be re-homed inside a dual
    dialogue block.
    """

    def __init__(self) -> None:
        self._elements: list[ScriptElement] = []

    def __len__(self) -> int:
        return len(self._elements)

    def append(self, element: ScriptElement) -> None:
        self._elements.append(element)

    def last(self) -> ScriptElement | None:
        return self._elements[-1] if self._elements else None

    def pop_until(self, element_type: ElementType) -> list[ScriptElement]:
        """Pop elements back to and including the latest one of a type.

        Popping stops early in front of a dual dialogue element, which is
        never nested. The popped span is returned in reading order.
        """
        popped: list[ScriptElement] = []
        while self._elements and not self._elements[-1].is_dual:
            element = self._elements.pop()
            popped.append(element)
            if element.type is element_type:
                break
        popped.reverse()
        return popped

    def build(self) -> list[ScriptElement]:
        """Return the emitted elements."""
        return list(self._elements)

"""Indentation-aware text buffer used by the C emitter."""

from __future__ import annotations


class Printer:
    """Append-only text accumulator with an indent depth.

    One Printer belongs to one emission pass. ``unindent`` below zero is
    clamped rather than treated as an error.
    """

    def __init__(self, indent_width: int = 4) -> None:
        self._parts: list[str] = []
        self._depth = 0
        self._unit = " " * indent_width

    def write(self, fragment: str) -> None:
        """Append raw text: no indentation, no newline."""
        self._parts.append(fragment)

    def write_line(self, fragment: str) -> None:
        """Append the current indentation, the fragment and a newline."""
        self._parts.append(f"{self.margin}{fragment}\n")

    def indent(self) -> None:
        self._depth += 1

    def unindent(self) -> None:
        if self._depth > 0:
            self._depth -= 1

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def margin(self) -> str:
        """Indentation prefix for the current depth."""
        return self._unit * self._depth

    def getvalue(self) -> str:
        return "".join(self._parts)

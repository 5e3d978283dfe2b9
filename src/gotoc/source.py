"""Span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"

    @property
    def known(self) -> bool:
        return self.start_line > 0


# Default for nodes built by hand instead of by the parser.
NO_SPAN = Span("<unknown>", 0, 0, 0, 0)

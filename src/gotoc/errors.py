"""Rust-style colored diagnostic rendering and the compiler's error types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from gotoc.source import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._file_cache: dict[str, list[str]] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _source_line(self, filename: str, line_num: int) -> str | None:
        """1-indexed line of a UTF-8 source file, or None when unavailable."""
        lines = self._file_cache.get(filename)
        if lines is None:
            try:
                lines = Path(filename).read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError):
                lines = []
            self._file_cache[filename] = lines
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        """Render *diag* as ``error[CODE]: message`` plus excerpts and notes.

        Labels whose span is unknown (hand-built trees) are skipped, so an
        emitter error on such a tree renders as the header and notes only.
        """
        color = _COLORS[diag.severity]
        out = [
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        ]
        for label in diag.labels:
            if label.span.known:
                out.extend(self._render_label(label, color))
        out.extend(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {n}" for n in diag.notes)
        return "\n".join(out)

    def _render_label(self, label: DiagnosticLabel, color: str) -> list[str]:
        span = label.span
        bar = f"  {self._c(_BLUE)}   |{self._c(_RESET)}"
        out = [f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}", bar]

        text = self._source_line(span.file, span.start_line)
        if text is not None:
            out.append(f"  {self._c(_BLUE)}{span.start_line:>4} |{self._c(_RESET)} {text}")
            # Carets only under a single-line span
            if span.start_line == span.end_line:
                width = max(1, span.end_col - span.start_col + 1)
                out.append(
                    f"{bar} {' ' * (span.start_col - 1)}"
                    f"{self._c(color)}{'^' * width}{self._c(_RESET)}"
                )

        if label.message:
            out.append(f"{bar}   {self._c(color)}{label.message}{self._c(_RESET)}")
        return out


class CompileError(Exception):
    """Batch front-end error carrying every diagnostic found in a file."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


class EmitError(CompileError):
    """Fatal emitter error: the tree holds a shape the C emitter cannot render.

    Emission aborts at the first such node; there is no partial output.
    """

    def __init__(
        self, message: str, span: Span, *, code: str = "E301",
        notes: list[str] | None = None,
    ) -> None:
        self.span = span
        self.code = code
        diag = Diagnostic(
            severity=Severity.ERROR,
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=span, message="")],
            notes=list(notes or []),
        )
        super().__init__([diag])

"""Syntax diagnostics and their terminal rendering.

Every diagnostic is an error: the lexer reports E100, the parser E200.
Rendering follows rustc's layout (header, ``-->`` location, the source line
with carets under the span, then notes and suggested fixes).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadrunner.source import Span

_RED = "\033[1;31m"
_BLUE = "\033[1;34m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """A source span, with an optional message printed under its carets."""

    span: Span
    message: str = ""


@dataclass(frozen=True)
class Suggestion:
    message: str
    replacement: str


@dataclass
class Diagnostic:
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.labels:
            return f"{self.labels[0].span}: {self.message}"
        return self.message


class DiagnosticRenderer:
    """Formats diagnostics as text, optionally with ANSI colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, list[str]] = {}

    def register_source(self, filename: str, source: str) -> None:
        """Make in-memory source (REPL lines, stdin) available for rendering."""
        self._sources[filename] = source.splitlines()

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    def _source_line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._sources:
            path = Path(filename)
            try:
                self._sources[filename] = (
                    path.read_text().splitlines() if path.is_file() else []
                )
            except OSError:
                self._sources[filename] = []
        lines = self._sources[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def _render_label(self, label: DiagnosticLabel) -> list[str]:
        span = label.span
        bar = self._paint("   |", _BLUE)
        out = [f"  {self._paint('-->', _BLUE)} {span}", f"  {bar}"]

        text = self._source_line(span.file, span.start_line)
        if text is not None:
            out.append(f"  {self._paint(f'{span.start_line:>4} |', _BLUE)} {text}")
            # Multi-line spans get no carets.
            if span.start_line == span.end_line:
                width = max(1, span.end_col - span.start_col + 1)
                pad = " " * (span.start_col - 1)
                out.append(f"  {bar} {pad}{self._paint('^' * width, _RED)}")

        if label.message:
            out.append(f"  {bar}   {self._paint(label.message, _RED)}")
        return out

    def render(self, diag: Diagnostic) -> str:
        out = [
            self._paint(f"error[{diag.code}]", _RED)
            + self._paint(f": {diag.message}", _BOLD)
        ]
        for label in diag.labels:
            out.extend(self._render_label(label))
        for note in diag.notes:
            out.append(f"  {self._paint('=', _BLUE)} note: {note}")
        for fix in diag.suggestions:
            out.append(f"  {self._paint('try:', _BLUE)} {fix.message}: {fix.replacement}")
        return "\n".join(out)


class CompileError(Exception):
    """Batch of syntax diagnostics that stops a program from being evaluated."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")

"""Diagnostic values and the exceptions that carry them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from marklet.tokens import Span


class ErrorKind(Enum):
    """Tag identifying what went wrong, so callers can match on it."""

    UNTERMINATED_STRING = "unterminated-string"
    EMBEDDED_QUOTE = "embedded-quote"
    UNEXPECTED_CHARACTER = "unexpected-character"
    UNEXPECTED_TOKEN = "unexpected-token"
    DUPLICATE_ARGUMENT = "duplicate-argument"
    INVALID_RANGE = "invalid-range"
    UNEXPECTED_EOF = "unexpected-eof"
    NESTING_TOO_DEEP = "nesting-too-deep"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single structured error with the source span it points at.

    ``expected`` and ``found`` are filled for unexpected-token and
    unexpected-eof diagnostics; ``name`` for duplicate arguments.
    """

    kind: ErrorKind
    message: str
    span: Span
    expected: str | None = None
    found: str | None = None
    name: str | None = None

    def format(self, source: str, filename: str = "input.mkl") -> str:
        lines = source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error[{self.kind.value}]: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, diagnostic: Diagnostic, source: str) -> None:
        self.diagnostic = diagnostic
        self.source = source
        super().__init__(self.format())

    @property
    def kind(self) -> ErrorKind:
        return self.diagnostic.kind

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def span(self) -> Span:
        return self.diagnostic.span

    def format(self, filename: str = "input.mkl") -> str:
        return self.diagnostic.format(self.source, filename)


class ParseError(Exception):
    """Raised when a document has one or more diagnostics.

    ``diagnostics`` is never empty and is ordered by source position.
    """

    def __init__(
        self,
        diagnostics: tuple[Diagnostic, ...],
        source: str,
        filename: str = "input.mkl",
    ) -> None:
        if not diagnostics:
            raise ValueError("ParseError requires at least one diagnostic")
        self.diagnostics = diagnostics
        self.source = source
        self.filename = filename
        super().__init__(self.format(filename))

    @property
    def kinds(self) -> tuple[ErrorKind, ...]:
        return tuple(d.kind for d in self.diagnostics)

    @property
    def first(self) -> Diagnostic:
        return self.diagnostics[0]

    def format(self, filename: str = "input.mkl") -> str:
        return "\n\n".join(d.format(self.source, filename) for d in self.diagnostics)

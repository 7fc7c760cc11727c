"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Structural (single-character)
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    COLON = auto()  # :
    COMMA = auto()  # ,

    # Range operator
    DOTDOT = auto()  # ..

    # Content
    IDENTIFIER = auto()  # letter (letter | digit | - | _)*
    NUMBER = auto()  # -? digit+
    STRING = auto()  # "..." verbatim, value excludes the quotes

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based code point offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

# Human-readable spelling used in diagnostics
TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.COLON: "':'",
    TokenType.COMMA: "','",
    TokenType.DOTDOT: "'..'",
    TokenType.IDENTIFIER: "identifier",
    TokenType.NUMBER: "number",
    TokenType.STRING: "string literal",
    TokenType.EOF: "end of input",
}

WHITESPACE = frozenset(" \t\r\n")

# Identifier continuation characters besides letters and digits
_IDENT_SPECIAL = frozenset("-_")


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch.isalpha()


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch.isalpha() or is_digit(ch) or ch in _IDENT_SPECIAL


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch in "0123456789" and ch != ""


def describe(tt: TokenType) -> str:
    """Return the diagnostic spelling of a token type."""
    return TOKEN_DESCRIPTIONS[tt]

"""Marklet lexer: converts source text into a lazy token stream."""

from __future__ import annotations

from collections.abc import Iterator

from marklet.errors import Diagnostic, ErrorKind, LexError
from marklet.tokens import (
    SINGLE_CHAR_TOKENS,
    WHITESPACE,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_ident_char,
    is_ident_start,
)


class Lexer:
    """Tokenize Marklet source text into a stream of Token objects.

    Tokens are produced on demand by iterating the lexer; the stream always
    ends with a single EOF token.  Lexing stops at the first error.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1

    def __iter__(self) -> Iterator[Token]:
        while True:
            self._skip_ws()
            if self._pos >= len(self._source):
                break
            yield self._lex_token()
        yield self._emit(TokenType.EOF, "", "")

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: str, raw: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        return Token(tt, value, raw, Span(start, end))

    def _error(
        self,
        kind: ErrorKind,
        message: str,
        start: Position | None = None,
        end: Position | None = None,
    ) -> LexError:
        if start is None:
            start = self._current_pos()
        if end is None:
            end = Position(start.line, start.column + 1, start.offset + 1)
        return LexError(Diagnostic(kind, message, Span(start, end)), self._source)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _skip_ws(self) -> None:
        while self._pos < len(self._source) and self._peek() in WHITESPACE:
            self._advance()

    def _lex_token(self) -> Token:
        ch = self._peek()

        tt = SINGLE_CHAR_TOKENS.get(ch)
        if tt is not None:
            start = self._current_pos()
            self._advance()
            return self._emit(tt, ch, ch, start)

        if ch == ".":
            return self._lex_dotdot()

        if ch == '"':
            return self._lex_string()

        if is_digit(ch) or (ch == "-" and is_digit(self._peek(1))):
            return self._lex_number()

        if is_ident_start(ch):
            return self._lex_identifier()

        raise self._error(ErrorKind.UNEXPECTED_CHARACTER, f"unexpected character {ch!r}")

    # ------------------------------------------------------------------
    # Token rules
    # ------------------------------------------------------------------

    def _lex_dotdot(self) -> Token:
        start = self._current_pos()
        if self._peek(1) != ".":
            raise self._error(
                ErrorKind.UNEXPECTED_CHARACTER, "unexpected '.' (did you mean '..'?)", start
            )
        self._advance()
        self._advance()
        return self._emit(TokenType.DOTDOT, "..", "..", start)

    def _lex_number(self) -> Token:
        start = self._current_pos()
        chars = []
        if self._peek() == "-":
            chars.append(self._advance())
        while self._pos < len(self._source) and is_digit(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        return self._emit(TokenType.NUMBER, text, text, start)

    def _lex_identifier(self) -> Token:
        start = self._current_pos()
        chars = []
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        return self._emit(TokenType.IDENTIFIER, text, text, start)

    def _lex_string(self) -> Token:
        """Scan verbatim up to the next quote; no escape processing.

        Since there is no escape for '"', a closing quote followed directly
        by another quote, a letter or a digit is taken to be a quote inside
        the string and reported as EMBEDDED_QUOTE.  This rejects otherwise
        well-formed input such as ``p{"a"em}`` or ``"a""b"``; separate such
        tokens with whitespace.
        """
        start = self._current_pos()
        self._advance()  # consume opening quote
        content_start = self._pos

        while self._pos < len(self._source) and self._peek() != '"':
            self._advance()

        if self._pos >= len(self._source):
            raise self._error(
                ErrorKind.UNTERMINATED_STRING, "unterminated string literal", start
            )

        content = self._source[content_start : self._pos]
        quote_pos = self._current_pos()
        self._advance()  # consume closing quote

        # A quote glued to more text means the string held an unescaped '"'
        nxt = self._peek()
        if nxt == '"' or nxt.isalpha() or is_digit(nxt):
            raise self._error(
                ErrorKind.EMBEDDED_QUOTE,
                "string literals cannot contain '\"' (escape sequences are not supported)",
                quote_pos,
            )

        raw = self._source[start.offset : self._pos]
        return self._emit(TokenType.STRING, content, raw, start)


def iter_tokens(source: str) -> Iterator[Token]:
    """Lazily tokenize source text; raises LexError when the bad input is reached."""
    return iter(Lexer(source))


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return list(Lexer(source))

"""Marklet parser: converts a token stream into an AST."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from marklet.ast import Document, List, ListItem, Node, Number, Range, String, TextNode, Value
from marklet.config import ParserOptions, depth_ceiling
from marklet.errors import Diagnostic, ErrorKind, LexError, ParseError
from marklet.lexer import iter_tokens
from marklet.tokens import Position, Span, Token, TokenType, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of a parse: a document, or the diagnostics explaining why not."""

    document: Document | None
    diagnostics: tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class _Failure(Exception):
    """Unwinds the current item after a grammar error."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class _Halt(Exception):
    """Stops the whole parse (lexing error, or recovery disabled)."""


class Parser:
    """Recursive descent parser for Marklet token streams.

    Grammar errors are collected as diagnostics.  With recovery enabled the
    parser skips to the next sibling after an error and keeps going.
    """

    def __init__(
        self,
        tokens: Iterator[Token],
        source: str,
        options: ParserOptions | None = None,
    ) -> None:
        self._tokens = tokens
        self._source = source
        self._options = options or ParserOptions()
        self._max_depth = min(self._options.max_depth, depth_ceiling())
        self._buffer: deque[Token] = deque()
        self._last: Token | None = None
        self._prev: Token | None = None
        self._consumed = 0
        self._depth = 0
        # Delimiters consumed but not yet closed
        self._open: list[TokenType] = []
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _fill(self, count: int) -> None:
        while len(self._buffer) < count:
            if self._last is not None and self._last.type == TokenType.EOF:
                return
            try:
                tok = next(self._tokens)
            except StopIteration:
                return
            except LexError as exc:
                self._diagnostics.append(exc.diagnostic)
                raise _Halt from exc
            self._buffer.append(tok)
            self._last = tok

    def _peek(self, offset: int = 0) -> Token:
        self._fill(offset + 1)
        if offset < len(self._buffer):
            return self._buffer[offset]
        assert self._last is not None
        return self._last  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.type == TokenType.EOF:
            return tok
        self._buffer.popleft()
        self._prev = tok
        self._consumed += 1

        if tok.type in _OPENERS:
            self._open.append(tok.type)
        elif tok.type in _CLOSERS:
            opener = _CLOSERS[tok.type]
            if opener in self._open:
                while self._open.pop() != opener:
                    pass
        return tok

    def _expect(self, tt: TokenType, expected: str | None = None) -> Token:
        if not self._at(tt):
            raise self._unexpected(expected or describe(tt))
        return self._advance()

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        if self._prev is not None:
            return self._prev.span.end
        return self._peek().span.start

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def parse(self) -> ParseResult:
        children: list[Node | TextNode] = []
        try:
            children = self._parse_items(None)
            end = self._peek().span.end
        except _Halt:
            end = None

        # Stable sort keeps discovery order for diagnostics at the same offset
        diagnostics = tuple(sorted(self._diagnostics, key=lambda d: d.span.start.offset))
        if diagnostics:
            return ParseResult(None, diagnostics)

        assert end is not None
        return ParseResult(Document(tuple(children), Span(Position(1, 1, 0), end)), ())

    def _parse_items(self, closing: TokenType | None) -> list[Node | TextNode]:
        """Parse nodes and text nodes until EOF or the closing token."""
        items: list[Node | TextNode] = []
        base = len(self._open)

        while not self._at(TokenType.EOF) and not (closing is not None and self._at(closing)):
            started_at = self._consumed
            try:
                items.append(self._parse_item())
            except _Failure as exc:
                self._diagnostics.append(exc.diagnostic)
                if not self._options.recover:
                    raise _Halt from exc
                self._synchronize(base, started_at)

        return items

    def _parse_item(self) -> Node | TextNode:
        tok = self._peek()
        if tok.type == TokenType.STRING:
            self._advance()
            return TextNode(tok.value, tok.span)
        if tok.type == TokenType.IDENTIFIER:
            return self._parse_node()
        raise self._unexpected("node name or string literal")

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _parse_node(self) -> Node:
        name_tok = self._advance()  # consume IDENTIFIER

        arguments: dict[str, Value] = {}
        if self._at(TokenType.LPAREN):
            arguments = self._parse_arglist()

        children: list[Node | TextNode] = []
        if self._at(TokenType.LBRACE):
            children = self._parse_block()

        return Node(
            name_tok.value,
            arguments,
            tuple(children),
            Span(name_tok.span.start, self._prev_end()),
        )

    def _parse_block(self) -> list[Node | TextNode]:
        open_tok = self._advance()  # consume LBRACE
        self._depth += 1
        try:
            if self._depth > self._max_depth:
                raise _Failure(
                    Diagnostic(
                        ErrorKind.NESTING_TOO_DEEP,
                        f"blocks nested deeper than {self._max_depth} levels",
                        open_tok.span,
                    )
                )
            children = self._parse_items(TokenType.RBRACE)
            self._expect(TokenType.RBRACE, "'}' to close block")
        finally:
            self._depth -= 1
        return children

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def _parse_arglist(self) -> dict[str, Value]:
        self._advance()  # consume LPAREN
        args: dict[str, Value] = {}

        # () is the same as no argument list at all
        if self._at(TokenType.RPAREN):
            self._advance()
            return args

        while True:
            if not self._at(TokenType.IDENTIFIER):
                raise self._unexpected("argument name")
            key_tok = self._advance()
            self._expect(TokenType.COLON, "':' after argument name")
            value = self._parse_value()

            if key_tok.value in args:
                self._diagnostics.append(
                    Diagnostic(
                        ErrorKind.DUPLICATE_ARGUMENT,
                        f"duplicate argument '{key_tok.value}'",
                        key_tok.span,
                        name=key_tok.value,
                    )
                )
            else:
                args[key_tok.value] = value

            if self._at(TokenType.COMMA):
                self._advance()
                if self._at(TokenType.RPAREN):
                    raise self._unexpected("argument name (trailing ',' is not allowed)")
                continue

            self._expect(TokenType.RPAREN, "',' or ')'")
            return args

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _parse_value(self) -> Value:
        tok = self._peek()

        if tok.type == TokenType.NUMBER:
            return self._parse_number_or_range()
        if tok.type == TokenType.STRING:
            self._advance()
            return String(tok.value, tok.span)
        if tok.type == TokenType.LBRACKET:
            return self._parse_list()
        if tok.type == TokenType.DOTDOT:
            raise self._invalid_range("range is missing its start value", tok.span)
        raise self._unexpected("value")

    def _parse_number_or_range(self) -> Number | Range:
        if self._peek(1).type == TokenType.DOTDOT:
            return self._parse_range()
        tok = self._advance()
        return Number(int(tok.value), tok.span)

    def _parse_range(self) -> Range:
        start_tok = self._expect(TokenType.NUMBER)
        self._expect(TokenType.DOTDOT)

        end: int | None = None
        if self._at(TokenType.NUMBER):
            end = int(self._advance().value)

        if self._at(TokenType.DOTDOT):
            raise self._invalid_range("a range takes a single '..'", self._peek().span)

        return Range(int(start_tok.value), end, Span(start_tok.span.start, self._prev_end()))

    def _parse_list(self) -> List:
        open_tok = self._advance()  # consume LBRACKET
        items: list[ListItem] = []

        if self._at(TokenType.RBRACKET):
            close_tok = self._advance()
            return List((), Span(open_tok.span.start, close_tok.span.end))

        while True:
            items.append(self._parse_list_item())

            if self._at(TokenType.COMMA):
                self._advance()
                if self._at(TokenType.RBRACKET):
                    raise self._unexpected("list item (trailing ',' is not allowed)")
                continue

            close_tok = self._expect(TokenType.RBRACKET, "',' or ']'")
            return List(tuple(items), Span(open_tok.span.start, close_tok.span.end))

    def _parse_list_item(self) -> ListItem:
        tok = self._peek()
        if tok.type == TokenType.NUMBER:
            return self._parse_number_or_range()
        if tok.type == TokenType.DOTDOT:
            raise self._invalid_range("range is missing its start value", tok.span)
        raise self._unexpected("number or range")

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def _synchronize(self, base: int, started_at: int) -> None:
        """Skip the rest of a malformed item so the next sibling can be parsed.

        ``base`` is the open-delimiter depth of the enclosing item loop; tokens
        are skipped until that depth is restored and the next token can start
        an item, or until the enclosing block's '}' is reached.
        """
        skipped_from = self._peek().span.start
        if self._consumed == started_at:
            self._advance()

        while not self._at(TokenType.EOF):
            tok = self._peek()
            extra = len(self._open) > base

            if not extra and tok.type in (TokenType.IDENTIFIER, TokenType.STRING):
                break

            if (
                tok.type == TokenType.RBRACE
                and base > 0
                and TokenType.LBRACE not in self._open[base:]
            ):
                # Closes the enclosing block; drop what was left open inside it
                del self._open[base:]
                break

            self._advance()

        logger.debug(
            "recovered at %d:%d after skipping from %d:%d",
            self._peek().span.start.line,
            self._peek().span.start.column,
            skipped_from.line,
            skipped_from.column,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _unexpected(self, expected: str) -> _Failure:
        tok = self._peek()
        if tok.type == TokenType.EOF:
            return _Failure(
                Diagnostic(
                    ErrorKind.UNEXPECTED_EOF,
                    f"unexpected end of input, expected {expected}",
                    tok.span,
                    expected=expected,
                    found=describe(tok.type),
                )
            )
        return _Failure(
            Diagnostic(
                ErrorKind.UNEXPECTED_TOKEN,
                f"expected {expected}, found {describe(tok.type)} {tok.raw!r}",
                tok.span,
                expected=expected,
                found=tok.raw,
            )
        )

    def _invalid_range(self, message: str, span: Span) -> _Failure:
        return _Failure(Diagnostic(ErrorKind.INVALID_RANGE, message, span))


# Module-level constants
_OPENERS: frozenset[TokenType] = frozenset(
    {TokenType.LPAREN, TokenType.LBRACE, TokenType.LBRACKET}
)
_CLOSERS: dict[TokenType, TokenType] = {
    TokenType.RPAREN: TokenType.LPAREN,
    TokenType.RBRACE: TokenType.LBRACE,
    TokenType.RBRACKET: TokenType.LBRACKET,
}


def parse_result(source: str, options: ParserOptions | None = None) -> ParseResult:
    """Parse source text without raising on malformed input."""
    return Parser(iter_tokens(source), source, options).parse()


def parse(
    source: str,
    filename: str = "input.mkl",
    options: ParserOptions | None = None,
) -> Document:
    """Convenience function: parse source text and return a Document AST.

    Raises ParseError carrying every diagnostic when the source is malformed.
    """
    result = parse_result(source, options)
    if result.document is None:
        raise ParseError(result.diagnostics, source, filename)
    return result.document

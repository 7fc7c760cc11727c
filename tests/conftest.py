"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from marklet.ast import Document
from marklet.errors import ErrorKind, ParseError
from marklet.lexer import tokenize
from marklet.parser import parse, parse_result
from marklet.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Document."""

    def _parse(source: str, filename: str = "test.mkl") -> Document:
        return parse(source, filename)

    return _parse


@pytest.fixture
def parse_kinds():
    """Return a helper that parses malformed source and returns its error kinds."""

    def _kinds(source: str) -> list[ErrorKind]:
        result = parse_result(source)
        assert result.document is None, "Expected parse to fail"
        return [d.kind for d in result.diagnostics]

    return _kinds


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_fails_with(source: str, kind: ErrorKind) -> ParseError:
    """Assert that parsing fails and the first diagnostic has the given kind."""
    with pytest.raises(ParseError) as exc_info:
        parse(source)
    err = exc_info.value
    assert err.diagnostics[0].kind == kind, f"Expected {kind}, got {err.kinds}"
    return err

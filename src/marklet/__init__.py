"""Marklet markup language front end: lexer, parser, and AST."""

from __future__ import annotations

__version__ = "0.1.0"

from marklet.ast import (  # noqa: E402
    Document,
    List,
    Node,
    Number,
    Range,
    String,
    TextNode,
    walk,
)
from marklet.config import ParserOptions  # noqa: E402
from marklet.errors import Diagnostic, ErrorKind, LexError, ParseError  # noqa: E402
from marklet.parser import ParseResult, parse, parse_result  # noqa: E402

__all__ = [
    "Diagnostic",
    "Document",
    "ErrorKind",
    "LexError",
    "List",
    "Node",
    "Number",
    "ParseError",
    "ParseResult",
    "ParserOptions",
    "Range",
    "String",
    "TextNode",
    "__version__",
    "parse",
    "parse_result",
    "walk",
]

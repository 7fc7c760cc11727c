"""Human-readable AST dump, for troubleshooting parser output."""

from __future__ import annotations

import sys
from typing import TextIO

from marklet.ast import Document, List, Node, Number, Range, String, TextNode, Value


def dump_ast(doc: Document, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump_document(doc, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_document(doc: Document, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Document\n")
    for child in doc.children:
        _dump_item(child, depth + 1, f)


def _dump_item(item: Node | TextNode, depth: int, f: TextIO) -> None:
    if isinstance(item, TextNode):
        f.write(f"{_indent(depth)}Text({item.value!r})\n")
        return

    f.write(f"{_indent(depth)}Node {item.name}\n")
    for name, value in item.arguments.items():
        f.write(f"{_indent(depth + 1)}Arg {name}=")
        _dump_value_inline(value, f)
        f.write("\n")
    for child in item.children:
        _dump_item(child, depth + 1, f)


def _dump_value_inline(value: Value, f: TextIO) -> None:
    if isinstance(value, Number):
        f.write(f"Number({value.value})")
    elif isinstance(value, String):
        f.write(f"String({value.value!r})")
    elif isinstance(value, Range):
        f.write(f"Range({value.start}, {value.end})")
    elif isinstance(value, List):
        f.write("List(")
        for i, item in enumerate(value.items):
            if i:
                f.write(", ")
            _dump_value_inline(item, f)
        f.write(")")

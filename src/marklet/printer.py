"""Regenerate canonical Marklet source from a Document."""

from __future__ import annotations

from marklet.ast import Document, List, Node, Number, Range, String, TextNode, Value


def to_source(doc: Document, indent: str = "    ") -> str:
    """Render doc as source text that parses back to an equal Document.

    String contents are written verbatim, so a multi-line string keeps its
    own line breaks and leading whitespace regardless of nesting.
    """
    lines: list[str] = []
    for child in doc.children:
        _write_item(child, 0, indent, lines)
    return "\n".join(lines) + ("\n" if lines else "")


def format_value(value: Value) -> str:
    """Return the source spelling of a single argument value."""
    if isinstance(value, Number):
        return str(value.value)
    if isinstance(value, String):
        return f'"{value.value}"'
    if isinstance(value, Range):
        end = "" if value.end is None else str(value.end)
        return f"{value.start}..{end}"
    if isinstance(value, List):
        return "[" + ", ".join(format_value(item) for item in value.items) + "]"
    raise TypeError(f"not a Marklet value: {type(value).__name__}")


def _write_item(item: Node | TextNode, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    if isinstance(item, TextNode):
        lines.append(f'{pad}"{item.value}"')
        return

    head = pad + item.name
    if item.arguments:
        args = ", ".join(f"{key}: {format_value(val)}" for key, val in item.arguments.items())
        head += f"({args})"

    if not item.children:
        lines.append(head)
        return

    lines.append(head + " {")
    for child in item.children:
        _write_item(child, depth + 1, indent, lines)
    lines.append(pad + "}")

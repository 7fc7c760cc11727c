"""AST node types for Marklet parsed documents.

Spans are carried for diagnostics and tooling but are excluded from equality,
so two trees compare equal when they have the same structure and values.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from marklet.tokens import Span

# ----------------------------------------------------------------------
# Values
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Number:
    """Decimal integer literal."""

    value: int
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class String:
    """Verbatim string literal (no escape processing)."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Range:
    """Numeric range start..end; end None means unbounded above."""

    start: int
    end: int | None = None
    span: Span | None = field(default=None, compare=False, repr=False)

    @property
    def is_open(self) -> bool:
        return self.end is None


ListItem = Number | Range


@dataclass(frozen=True, slots=True)
class List:
    """Bracketed list of numbers and ranges."""

    items: tuple[ListItem, ...] = ()
    span: Span | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


Value = Number | String | List | Range

# ----------------------------------------------------------------------
# Nodes
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextNode:
    """A string literal standing where a node is expected."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Node:
    """A markup element: name(arguments) { children }.

    ``arguments`` is a read-only mapping that keeps source order; comparing
    two nodes compares arguments by key and value only.
    """

    name: str
    arguments: Mapping[str, Value] = field(default_factory=dict)
    children: tuple[Node | TextNode, ...] = ()
    span: Span | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))
        object.__setattr__(self, "children", tuple(self.children))

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.arguments.items()), self.children))


Item = Node | TextNode


@dataclass(frozen=True, slots=True)
class Document:
    """Root document node."""

    children: tuple[Item, ...] = ()
    span: Span | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


def walk(root: Document | Node) -> Iterator[Item]:
    """Yield every node below root in document order (pre-order)."""
    stack: list[Item] = list(reversed(root.children))
    while stack:
        item = stack.pop()
        yield item
        if isinstance(item, Node):
            stack.extend(reversed(item.children))

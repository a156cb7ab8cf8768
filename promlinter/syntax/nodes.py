"""Typed subset of the Go syntax tree consumed by the metric analyzers.

Only the expression and statement shapes the analyzers match on get their own
class. Everything else is an :class:`Other` node that keeps its grammar type
and children so the walker can still descend into it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..models import SourcePosition


@dataclass(eq=False)
class Node:
    """Base class for syntax nodes; nodes compare by identity."""

    pos: SourcePosition

    kind = "node"

    def children(self) -> Iterator["Node"]:
        return iter(())


@dataclass(eq=False)
class File(Node):
    path: str = ""
    body: List[Node] = field(default_factory=list)
    has_errors: bool = False

    kind = "source_file"

    def children(self) -> Iterator[Node]:
        return iter(self.body)


@dataclass(eq=False)
class Ident(Node):
    """Identifier; ``decl`` is the declaring node when the name resolved."""

    name: str = ""
    decl: Optional[Node] = None

    kind = "identifier"


@dataclass(eq=False)
class BasicLit(Node):
    """Literal token. ``literal`` is STRING, INT, FLOAT, IMAG, CHAR or ILLEGAL."""

    literal: str = "STRING"
    value: str = ""

    @property
    def kind(self) -> str:  # type: ignore[override]
        return {
            "STRING": "string_literal",
            "INT": "int_literal",
            "FLOAT": "float_literal",
            "IMAG": "imaginary_literal",
            "CHAR": "rune_literal",
        }.get(self.literal, "literal")


@dataclass(eq=False)
class KeyValueExpr(Node):
    key: Optional[Node] = None
    value: Optional[Node] = None

    kind = "keyed_element"

    def children(self) -> Iterator[Node]:
        for child in (self.key, self.value):
            if child is not None:
                yield child


@dataclass(eq=False)
class CompositeLit(Node):
    """``T{...}`` literal; ``type`` is None for elided element literals."""

    type: Optional[Node] = None
    elts: List[Node] = field(default_factory=list)

    kind = "composite_literal"

    def children(self) -> Iterator[Node]:
        if self.type is not None:
            yield self.type
        yield from self.elts


@dataclass(eq=False)
class BinaryExpr(Node):
    op: str = ""
    x: Optional[Node] = None
    y: Optional[Node] = None

    kind = "binary_expression"

    def children(self) -> Iterator[Node]:
        for child in (self.x, self.y):
            if child is not None:
                yield child


@dataclass(eq=False)
class SelectorExpr(Node):
    """``x.Sel``; the selected name is never resolved."""

    x: Optional[Node] = None
    sel: Optional[Ident] = None

    kind = "selector_expression"

    def children(self) -> Iterator[Node]:
        if self.x is not None:
            yield self.x
        if self.sel is not None:
            yield self.sel


@dataclass(eq=False)
class CallExpr(Node):
    fun: Optional[Node] = None
    args: List[Node] = field(default_factory=list)

    kind = "call_expression"

    def children(self) -> Iterator[Node]:
        if self.fun is not None:
            yield self.fun
        yield from self.args


@dataclass(eq=False)
class SendStmt(Node):
    """``chan <- value``."""

    chan: Optional[Node] = None
    value: Optional[Node] = None

    kind = "send_statement"

    def children(self) -> Iterator[Node]:
        for child in (self.chan, self.value):
            if child is not None:
                yield child


@dataclass(eq=False)
class AssignStmt(Node):
    """Assignment or ``:=`` short variable declaration (``tok`` tells which)."""

    lhs: List[Node] = field(default_factory=list)
    tok: str = "="
    rhs: List[Node] = field(default_factory=list)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return "short_var_declaration" if self.tok == ":=" else "assignment_statement"

    def children(self) -> Iterator[Node]:
        yield from self.lhs
        yield from self.rhs

    def value_for(self, name: str) -> Optional[Node]:
        """Return the right-hand expression assigned to ``name``, matched by index."""
        for index, target in enumerate(self.lhs):
            if isinstance(target, Ident) and target.name == name:
                return self.rhs[index] if index < len(self.rhs) else None
        return None


@dataclass(eq=False)
class ValueSpec(Node):
    """One ``var`` or ``const`` spec."""

    names: List[Ident] = field(default_factory=list)
    type: Optional[Node] = None
    values: List[Node] = field(default_factory=list)
    const: bool = False

    @property
    def kind(self) -> str:  # type: ignore[override]
        return "const_spec" if self.const else "var_spec"

    def children(self) -> Iterator[Node]:
        yield from self.names
        if self.type is not None:
            yield self.type
        yield from self.values

    def value_for(self, name: str) -> Optional[Node]:
        """Return the initializer of ``name``, or None when it has none."""
        for index, ident in enumerate(self.names):
            if ident.name == name:
                return self.values[index] if index < len(self.values) else None
        return None


@dataclass(eq=False)
class Other(Node):
    """Any construct the analyzers do not match on, by grammar node type."""

    type_name: str = ""
    items: List[Node] = field(default_factory=list)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.type_name

    def children(self) -> Iterator[Node]:
        return iter(self.items)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants depth-first, in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children())))


__all__ = [
    "AssignStmt",
    "BasicLit",
    "BinaryExpr",
    "CallExpr",
    "CompositeLit",
    "File",
    "Ident",
    "KeyValueExpr",
    "Node",
    "Other",
    "SelectorExpr",
    "SendStmt",
    "ValueSpec",
    "walk",
]

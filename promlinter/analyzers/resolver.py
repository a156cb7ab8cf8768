"""Resolution of string-valued expressions to their literal text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Set

from ..logging import get_logger
from ..models import SourcePosition
from ..syntax.nodes import AssignStmt, BasicLit, BinaryExpr, Ident, Node, ValueSpec
from ..syntax.literals import unquote

Reporter = Callable[[SourcePosition, str], None]


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one expression: a string value or a failure."""

    ok: bool
    value: str = ""

    @classmethod
    def success(cls, value: str) -> "Resolution":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls) -> "Resolution":
        return _FAILED


_FAILED = Resolution(ok=False)


def declared_value(ident: Ident) -> Optional[Node]:
    """Return the initializer bound to ``ident`` by its declaration, if any.

    Only ``:=`` assignments and ``var``/``const`` specs bind a value.
    """
    decl = ident.decl
    if isinstance(decl, AssignStmt) and decl.tok == ":=":
        return decl.value_for(ident.name)
    if isinstance(decl, ValueSpec):
        return decl.value_for(ident.name)
    return None


class LiteralResolver:
    """Resolves string literals, identifier back-references and ``+`` concatenation.

    Anything else is a resolution failure. In strict mode an unsupported shape
    is also reported through ``report`` so the user learns why a metric was
    skipped.
    """

    def __init__(self, *, strict: bool = False, report: Optional[Reporter] = None) -> None:
        self.strict = strict
        self._report = report
        self._active: Set[Node] = set()
        self.logger = get_logger("resolver")

    def resolve(self, field: str, node: Optional[Node]) -> Resolution:
        """Resolve ``node``; ``field`` names the option being read, for diagnostics."""
        if node is None:
            return Resolution.failure()

        if isinstance(node, BasicLit):
            if node.literal == "STRING":
                return Resolution.success(unquote(node.value))
            return Resolution.failure()

        if isinstance(node, Ident):
            value = declared_value(node)
            if value is None:
                return Resolution.failure()
            if value in self._active:
                self.logger.debug("Circular declaration of %s at %s", node.name, node.pos)
                return Resolution.failure()
            self._active.add(value)
            try:
                return self.resolve(field, value)
            finally:
                self._active.discard(value)

        if isinstance(node, BinaryExpr):
            if node.op != "+":
                return Resolution.failure()
            left = self.resolve(field, node.x)
            if not left.ok:
                return left
            right = self.resolve(field, node.y)
            if not right.ok:
                return right
            return Resolution.success(left.value + right.value)

        if self.strict and self._report is not None:
            self._report(node.pos, f"parsing field {field} with type {node.kind} is not supported")
        return Resolution.failure()


__all__ = ["LiteralResolver", "Resolution", "declared_value"]

"""Tree-sitter powered Go parser producing the typed syntax model."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import tree_sitter_go
from tree_sitter import Language, Parser

from ..logging import get_logger
from ..models import SourcePosition
from .literals import MalformedLiteralError, unquote
from .nodes import (
    AssignStmt,
    BasicLit,
    BinaryExpr,
    CallExpr,
    CompositeLit,
    File,
    Ident,
    KeyValueExpr,
    Node,
    Other,
    SelectorExpr,
    SendStmt,
    ValueSpec,
)

GO_LANGUAGE = Language(tree_sitter_go.language())

_SCOPE_NODES = {
    "block",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "select_statement",
    "expression_case",
    "default_case",
    "type_case",
    "communication_case",
}

_LITERAL_TYPES = {
    "interpreted_string_literal": "STRING",
    "raw_string_literal": "STRING",
    "int_literal": "INT",
    "float_literal": "FLOAT",
    "imaginary_literal": "IMAG",
    "rune_literal": "CHAR",
}

# Names that are never references: field, type and label names.
_NAME_NODES = {
    "field_identifier",
    "type_identifier",
    "package_identifier",
    "label_name",
    "blank_identifier",
}


def _named(ts_node) -> List:  # type: ignore[no-untyped-def]
    return [child for child in ts_node.named_children if child.type != "comment"]


def _span(ts_node) -> tuple[int, int, str] | None:  # type: ignore[no-untyped-def]
    if ts_node is None:
        return None
    return (ts_node.start_byte, ts_node.end_byte, ts_node.type)


class _TreeBuilder:
    """Converts one tree-sitter tree and resolves identifiers as Go does per file."""

    def __init__(self, source: bytes, path: str) -> None:
        self._source = source
        self._path = path
        self._scopes: List[Dict[str, Node]] = []
        self._file_scope: Dict[str, Node] = {}
        self._unresolved: List[Ident] = []
        self.malformed: List[BasicLit] = []
        self._handlers: Dict[str, Callable] = {  # type: ignore[type-arg]
            "identifier": self._identifier,
            "call_expression": self._call,
            "selector_expression": self._selector,
            "binary_expression": self._binary,
            "composite_literal": self._composite,
            "literal_value": self._literal_value,
            "send_statement": self._send,
            "short_var_declaration": self._short_var,
            "assignment_statement": self._assignment,
            "var_spec": self._value_spec,
            "const_spec": self._value_spec,
            "function_declaration": self._function,
            "method_declaration": self._function,
            "func_literal": self._function,
            "parameter_declaration": self._parameter,
            "variadic_parameter_declaration": self._parameter,
            "range_clause": self._clause_with_define,
            "receive_statement": self._clause_with_define,
            "type_switch_statement": self._type_switch,
        }

    def build(self, root) -> File:  # type: ignore[no-untyped-def]
        body = [node for node in (self.convert(child) for child in _named(root)) if node is not None]
        for ident in self._unresolved:
            ident.decl = self._file_scope.get(ident.name)
        return File(
            pos=SourcePosition(self._path, 1, 1),
            path=self._path,
            body=body,
            has_errors=bool(root.has_error) or bool(self.malformed),
        )

    def convert(self, ts_node) -> Optional[Node]:  # type: ignore[no-untyped-def]
        if ts_node is None or ts_node.type == "comment":
            return None
        kind = ts_node.type
        if kind in _LITERAL_TYPES:
            return self._literal(ts_node)
        if kind in _NAME_NODES:
            return Ident(pos=self._pos(ts_node), name=self._text(ts_node))
        handler = self._handlers.get(kind)
        if handler is not None:
            return handler(ts_node)
        if kind in _SCOPE_NODES:
            self._push()
            try:
                return self._generic(ts_node)
            finally:
                self._pop()
        return self._generic(ts_node)

    def _convert_all(self, ts_nodes) -> List[Node]:  # type: ignore[no-untyped-def]
        return [node for node in (self.convert(child) for child in ts_nodes) if node is not None]

    def _generic(self, ts_node) -> Other:  # type: ignore[no-untyped-def]
        return Other(
            pos=self._pos(ts_node),
            type_name=ts_node.type,
            items=self._convert_all(_named(ts_node)),
        )

    # -- scopes -----------------------------------------------------------------

    def _push(self) -> None:
        self._scopes.append({})

    def _pop(self) -> None:
        self._scopes.pop()

    def _declare(self, ident: Ident, decl: Node) -> None:
        if ident.name == "_":
            return
        ident.decl = decl
        scope = self._scopes[-1] if self._scopes else self._file_scope
        scope.setdefault(ident.name, decl)

    def _lookup(self, ident: Ident) -> None:
        for scope in reversed(self._scopes):
            if ident.name in scope:
                ident.decl = scope[ident.name]
                return
        self._unresolved.append(ident)

    def _declare_targets(self, ts_list, decl: Node, *, redeclare: bool = False) -> List[Node]:  # type: ignore[no-untyped-def]
        """Declare identifiers of a ``:=`` left-hand side; other shapes convert normally."""
        targets: List[Node] = []
        if ts_list is None:
            return targets
        items = _named(ts_list) if ts_list.type == "expression_list" else [ts_list]
        for item in items:
            if item.type != "identifier":
                converted = self.convert(item)
                if converted is not None:
                    targets.append(converted)
                continue
            ident = Ident(pos=self._pos(item), name=self._text(item))
            current = self._scopes[-1] if self._scopes else self._file_scope
            if redeclare and ident.name in current:
                ident.decl = current[ident.name]
            else:
                self._declare(ident, decl)
            targets.append(ident)
        return targets

    # -- handlers ---------------------------------------------------------------

    def _literal(self, ts_node) -> BasicLit:  # type: ignore[no-untyped-def]
        node = BasicLit(pos=self._pos(ts_node), literal=_LITERAL_TYPES[ts_node.type], value=self._text(ts_node))
        if node.literal == "STRING":
            try:
                unquote(node.value)
            except MalformedLiteralError:
                # The grammar accepts escapes the Go scanner rejects.
                node.literal = "ILLEGAL"
                self.malformed.append(node)
        return node

    def _identifier(self, ts_node) -> Ident:  # type: ignore[no-untyped-def]
        ident = Ident(pos=self._pos(ts_node), name=self._text(ts_node))
        self._lookup(ident)
        return ident

    def _call(self, ts_node) -> CallExpr:  # type: ignore[no-untyped-def]
        fun = self.convert(ts_node.child_by_field_name("function"))
        arguments = ts_node.child_by_field_name("arguments")
        args = self._convert_all(_named(arguments)) if arguments is not None else []
        return CallExpr(pos=self._pos(ts_node), fun=fun, args=args)

    def _selector(self, ts_node) -> SelectorExpr:  # type: ignore[no-untyped-def]
        operand = self.convert(ts_node.child_by_field_name("operand"))
        field_node = ts_node.child_by_field_name("field")
        sel = None
        if field_node is not None:
            sel = Ident(pos=self._pos(field_node), name=self._text(field_node))
        return SelectorExpr(pos=self._pos(ts_node), x=operand, sel=sel)

    def _binary(self, ts_node) -> BinaryExpr:  # type: ignore[no-untyped-def]
        operator = ts_node.child_by_field_name("operator")
        return BinaryExpr(
            pos=self._pos(ts_node),
            op=operator.type if operator is not None else "",
            x=self.convert(ts_node.child_by_field_name("left")),
            y=self.convert(ts_node.child_by_field_name("right")),
        )

    def _composite(self, ts_node) -> CompositeLit:  # type: ignore[no-untyped-def]
        type_node = self.convert(ts_node.child_by_field_name("type"))
        body = ts_node.child_by_field_name("body")
        elts = self._elements(body) if body is not None else []
        return CompositeLit(pos=self._pos(ts_node), type=type_node, elts=elts)

    def _literal_value(self, ts_node) -> CompositeLit:  # type: ignore[no-untyped-def]
        return CompositeLit(pos=self._pos(ts_node), type=None, elts=self._elements(ts_node))

    def _elements(self, ts_body) -> List[Node]:  # type: ignore[no-untyped-def]
        elts: List[Node] = []
        for element in _named(ts_body):
            if element.type == "keyed_element":
                parts = _named(element)
                if len(parts) < 2:
                    continue
                elts.append(
                    KeyValueExpr(
                        pos=self._pos(element),
                        key=self._key(parts[0]),
                        value=self.convert(self._unwrap(parts[-1])),
                    )
                )
                continue
            converted = self.convert(self._unwrap(element))
            if converted is not None:
                elts.append(converted)
        return elts

    @staticmethod
    def _unwrap(ts_node):  # type: ignore[no-untyped-def]
        if ts_node.type in ("literal_element", "element"):
            inner = _named(ts_node)
            if inner:
                return inner[0]
        return ts_node

    def _key(self, ts_node) -> Optional[Node]:  # type: ignore[no-untyped-def]
        key = self._unwrap(ts_node)
        if key.type in ("identifier", "field_identifier"):
            # Keys name struct fields and are never resolved.
            return Ident(pos=self._pos(key), name=self._text(key))
        return self.convert(key)

    def _send(self, ts_node) -> SendStmt:  # type: ignore[no-untyped-def]
        return SendStmt(
            pos=self._pos(ts_node),
            chan=self.convert(ts_node.child_by_field_name("channel")),
            value=self.convert(ts_node.child_by_field_name("value")),
        )

    def _short_var(self, ts_node) -> AssignStmt:  # type: ignore[no-untyped-def]
        stmt = AssignStmt(pos=self._pos(ts_node), tok=":=")
        right = ts_node.child_by_field_name("right")
        stmt.rhs = self._convert_all(_named(right)) if right is not None else []
        stmt.lhs = self._declare_targets(ts_node.child_by_field_name("left"), stmt, redeclare=True)
        return stmt

    def _assignment(self, ts_node) -> AssignStmt:  # type: ignore[no-untyped-def]
        operator = ts_node.child_by_field_name("operator")
        left = ts_node.child_by_field_name("left")
        right = ts_node.child_by_field_name("right")
        return AssignStmt(
            pos=self._pos(ts_node),
            lhs=self._convert_all(_named(left)) if left is not None else [],
            tok=operator.type if operator is not None else "=",
            rhs=self._convert_all(_named(right)) if right is not None else [],
        )

    def _value_spec(self, ts_node) -> ValueSpec:  # type: ignore[no-untyped-def]
        spec = ValueSpec(pos=self._pos(ts_node), const=ts_node.type == "const_spec")
        spec.type = self.convert(ts_node.child_by_field_name("type"))
        value = ts_node.child_by_field_name("value")
        if value is not None:
            spec.values = self._convert_all(_named(value) if value.type == "expression_list" else [value])
        for name in ts_node.children_by_field_name("name"):
            if name.type != "identifier":
                continue
            ident = Ident(pos=self._pos(name), name=self._text(name))
            self._declare(ident, spec)
            spec.names.append(ident)
        return spec

    def _function(self, ts_node) -> Other:  # type: ignore[no-untyped-def]
        node = Other(pos=self._pos(ts_node), type_name=ts_node.type)
        name = ts_node.child_by_field_name("name")
        if name is not None:
            ident = Ident(pos=self._pos(name), name=self._text(name))
            if ts_node.type == "function_declaration":
                self._declare(ident, node)
            node.items.append(ident)
        self._push()
        try:
            for field_name in ("receiver", "type_parameters", "parameters", "result", "body"):
                converted = self.convert(ts_node.child_by_field_name(field_name))
                if converted is not None:
                    node.items.append(converted)
        finally:
            self._pop()
        return node

    def _parameter(self, ts_node) -> Other:  # type: ignore[no-untyped-def]
        node = Other(pos=self._pos(ts_node), type_name=ts_node.type)
        for name in ts_node.children_by_field_name("name"):
            if name.type != "identifier":
                continue
            ident = Ident(pos=self._pos(name), name=self._text(name))
            self._declare(ident, node)
            node.items.append(ident)
        type_node = self.convert(ts_node.child_by_field_name("type"))
        if type_node is not None:
            node.items.append(type_node)
        return node

    def _clause_with_define(self, ts_node) -> Other:  # type: ignore[no-untyped-def]
        node = Other(pos=self._pos(ts_node), type_name=ts_node.type)
        right = self.convert(ts_node.child_by_field_name("right"))
        left = ts_node.child_by_field_name("left")
        defines = any(child.type == ":=" for child in ts_node.children)
        if defines:
            node.items.extend(self._declare_targets(left, node))
        elif left is not None:
            node.items.extend(self._convert_all(_named(left)))
        if right is not None:
            node.items.append(right)
        return node

    def _type_switch(self, ts_node) -> Other:  # type: ignore[no-untyped-def]
        node = Other(pos=self._pos(ts_node), type_name=ts_node.type)
        alias = _span(ts_node.child_by_field_name("alias"))
        self._push()
        try:
            for child in _named(ts_node):
                if alias is not None and _span(child) == alias:
                    node.items.extend(self._declare_targets(child, node))
                    continue
                converted = self.convert(child)
                if converted is not None:
                    node.items.append(converted)
        finally:
            self._pop()
        return node

    # -- helpers ----------------------------------------------------------------

    def _pos(self, ts_node) -> SourcePosition:  # type: ignore[no-untyped-def]
        row, column = ts_node.start_point[0], ts_node.start_point[1]
        return SourcePosition(self._path, row + 1, column + 1)

    def _text(self, ts_node) -> str:  # type: ignore[no-untyped-def]
        return self._source[ts_node.start_byte : ts_node.end_byte].decode("utf-8", errors="replace")


class GoParser:
    """Parses Go sources into :class:`~promlinter.syntax.nodes.File` trees."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)
        self.logger = get_logger("syntax")

    def parse(self, source: bytes | str, path: str = "") -> File:
        """Parse ``source`` and return the typed tree with resolved identifiers."""
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(source_bytes)
        builder = _TreeBuilder(source_bytes, path)
        result = builder.build(tree.root_node)
        for literal in builder.malformed:
            self.logger.warning("%s: invalid string literal %s", literal.pos, literal.value)
        if result.has_errors:
            self.logger.warning("Syntax errors in %s; analysis continues on the partial tree", path or "<source>")
        return result

    def parse_file(self, path: Path | str) -> File:
        """Read and parse a Go file; ``OSError`` propagates to the caller."""
        file_path = Path(path)
        return self.parse(file_path.read_bytes(), str(path))


__all__ = ["GO_LANGUAGE", "GoParser"]

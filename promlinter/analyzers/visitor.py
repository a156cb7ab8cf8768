"""Syntax tree walker that finds metric declarations.

Two declaration styles are recognised:

* direct constructors, e.g. ``prometheus.NewCounterVec(prometheus.CounterOpts{...}, labels)``,
  called through a package, a factory such as ``promauto.With(reg)``, or a
  dot-import;
* const metrics sent on a collector channel, e.g.
  ``ch <- prometheus.MustNewConstMetric(desc, prometheus.GaugeValue, v)`` where
  ``desc`` comes from ``prometheus.NewDesc``.

Each recognised site produces one :class:`~promlinter.models.Occurrence`.
Sites that cannot be fully resolved are skipped; in strict mode the reason is
recorded as an :class:`~promlinter.models.Issue`.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..logging import get_logger
from ..models import Issue, MetricDescriptor, MetricKind, Occurrence, OptionRecord, SourcePosition, build_fq_name
from ..syntax.nodes import CallExpr, File, Ident, Node, SelectorExpr, SendStmt, walk
from .options import OptionsExtractor
from .registry import (
    CONST_METRIC_ARGS,
    CONST_METRIC_KINDS,
    DESC_CONSTRUCTOR_ARGS,
    METRIC_CONSTRUCTORS,
    required_args,
    value_type_kind,
)
from .resolver import LiteralResolver, declared_value


def callee_name(node: Optional[Node]) -> Optional[str]:
    """Name of a called function: a bare identifier or a selector's final name."""
    if isinstance(node, Ident):
        return node.name
    if isinstance(node, SelectorExpr) and node.sel is not None:
        return node.sel.name
    return None


def build_descriptor(kind: MetricKind, options: OptionRecord, help_text: Optional[str]) -> MetricDescriptor:
    return MetricDescriptor(
        kind=kind,
        name=build_fq_name(options.namespace, options.subsystem, options.name),
        help=help_text or "",
    )


class MetricVisitor:
    """Collects metric occurrences and structural issues from syntax trees.

    A visitor owns its collections; use one instance per traversal when files
    are analyzed independently.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self.occurrences: List[Occurrence] = []
        self.issues: List[Issue] = []
        self._resolver = LiteralResolver(strict=strict, report=self._report)
        self._options = OptionsExtractor(self._resolver)
        self.logger = get_logger("visitor")

    def visit(self, tree: Node) -> None:
        """Walk ``tree`` depth-first and record every metric declaration."""
        for node in walk(tree):
            if isinstance(node, CallExpr):
                self._visit_call(node)
            elif isinstance(node, SendStmt):
                self._visit_send(node)
        if isinstance(tree, File):
            self.logger.debug(
                "%s: %d metric(s), %d structural issue(s)",
                tree.path or "<source>",
                len(self.occurrences),
                len(self.issues),
            )

    def _visit_call(self, call: CallExpr) -> None:
        method = callee_name(call.fun)
        if method is None or method not in METRIC_CONSTRUCTORS:
            return

        required = required_args(method)
        if len(call.args) < required:
            if self.strict:
                self._report(call.pos, f"{method} should have at least {required} arguments")
            return

        # Reported at the options argument, where the metric is configured.
        position = call.args[0].pos
        extracted = self._options.extract(call.args[0])
        if extracted is None:
            return

        descriptor = build_descriptor(METRIC_CONSTRUCTORS[method], extracted.options, extracted.help)
        self.occurrences.append(Occurrence(descriptor=descriptor, position=position))

    def _visit_send(self, send: SendStmt) -> None:
        call = send.value
        if not isinstance(call, CallExpr):
            return
        method = callee_name(call.fun)
        if method is None or method not in CONST_METRIC_ARGS:
            return

        required = CONST_METRIC_ARGS[method]
        if len(call.args) < required:
            if self.strict:
                self._report(call.pos, f"{method} should have at least {required} arguments")
            return

        desc = self._parse_desc(call.args[0])
        if desc is None:
            return
        name, help_text = desc

        if method in CONST_METRIC_KINDS:
            kind = CONST_METRIC_KINDS[method]
        else:
            kind = value_type_kind(callee_name(call.args[1]) or "")

        descriptor = MetricDescriptor(kind=kind, name=name, help=help_text)
        self.occurrences.append(Occurrence(descriptor=descriptor, position=call.pos))

    def _parse_desc(self, node: Node) -> Optional[Tuple[str, str]]:
        if isinstance(node, CallExpr):
            return self._parse_desc_call(node)
        if isinstance(node, Ident) and node.decl is not None:
            value = declared_value(node)
            if isinstance(value, CallExpr):
                return self._parse_desc_call(value)
            if self.strict:
                self._report(node.pos, f"parsing desc of type {node.decl.kind} is not supported")
        return None

    def _parse_desc_call(self, call: CallExpr) -> Optional[Tuple[str, str]]:
        if len(call.args) != DESC_CONSTRUCTOR_ARGS and self.strict:
            self._report(call.pos, f"NewDesc should have {DESC_CONSTRUCTOR_ARGS} args")
            return None
        if len(call.args) < 2:
            return None

        name = self._resolver.resolve("fqName", call.args[0])
        if not name.ok:
            return None
        help_text = self._resolver.resolve("help", call.args[1])
        if not help_text.ok:
            return None
        return name.value, help_text.value

    def _report(self, position: SourcePosition, text: str) -> None:
        self.logger.debug("%s: %s", position, text)
        self.issues.append(Issue(position=position, text=text))


__all__ = ["MetricVisitor", "build_descriptor", "callee_name"]

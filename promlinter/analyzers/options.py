"""Extraction of naming options from ``prometheus.*Opts`` struct literals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import OptionRecord
from ..syntax.nodes import CompositeLit, Ident, KeyValueExpr, Node
from .registry import OPTION_FIELDS
from .resolver import LiteralResolver, declared_value


@dataclass
class ExtractedOptions:
    """Naming fields plus help text (None when the literal sets no Help)."""

    options: OptionRecord
    help: Optional[str] = None


class OptionsExtractor:
    """Reads Namespace, Subsystem, Name and Help from an options argument."""

    def __init__(self, resolver: LiteralResolver) -> None:
        self._resolver = resolver

    def extract(self, node: Optional[Node]) -> Optional[ExtractedOptions]:
        """Return the options of ``node`` or None when they cannot be resolved.

        ``node`` is either the struct literal itself or an identifier bound to
        one by its declaration; deeper indirection is not followed.
        """
        if isinstance(node, CompositeLit):
            return self._from_composite(node)
        if isinstance(node, Ident):
            value = declared_value(node)
            if isinstance(value, CompositeLit):
                return self._from_composite(value)
        return None

    def _from_composite(self, literal: CompositeLit) -> Optional[ExtractedOptions]:
        result = ExtractedOptions(options=OptionRecord())
        for element in literal.elts:
            if not isinstance(element, KeyValueExpr) or not isinstance(element.key, Ident):
                continue
            field = element.key.name
            if field not in OPTION_FIELDS:
                continue

            # A partially resolved metric is never reported.
            resolution = self._resolver.resolve(field, element.value)
            if not resolution.ok:
                return None

            if field == "Namespace":
                result.options.namespace = resolution.value
            elif field == "Subsystem":
                result.options.subsystem = resolution.value
            elif field == "Name":
                result.options.name = resolution.value
            else:
                result.help = resolution.value
        return result


__all__ = ["ExtractedOptions", "OptionsExtractor"]

"""Validator applying the Prometheus client ``promlint`` naming rules."""

from __future__ import annotations

import re
from typing import Callable, Collection, Dict, List, Optional, Tuple

from ..models import MetricDescriptor, MetricKind, Problem
from .base import Validator, check_descriptor

_CAMEL_CASE = re.compile(r"[a-z][A-Z]")

_UNITS: Dict[str, str] = {
    # Base units.
    "amperes": "amperes",
    "bytes": "bytes",
    "celsius": "celsius",
    "grams": "grams",
    "joules": "joules",
    "kelvin": "kelvin",
    "meters": "meters",
    "metres": "metres",
    "seconds": "seconds",
    "volts": "volts",
    # Non-base units.
    "minutes": "seconds",
    "hours": "seconds",
    "days": "seconds",
    "weeks": "seconds",
    "milliseconds": "seconds",
    "microseconds": "seconds",
    "nanoseconds": "seconds",
    "feet": "meters",
    "inches": "meters",
    "miles": "meters",
    "bits": "bytes",
    "calories": "joules",
    "pounds": "grams",
    "ounces": "grams",
}

_UNIT_PREFIXES: Tuple[str, ...] = (
    "pico",
    "nano",
    "micro",
    "milli",
    "centi",
    "deci",
    "deca",
    "hecto",
    "kilo",
    "kibi",
    "mega",
    "mibi",
    "giga",
    "gibi",
    "tera",
    "tebi",
    "peta",
    "pebi",
)

_UNIT_ABBREVIATIONS = frozenset(
    {"s", "ms", "us", "ns", "sec", "b", "kb", "mb", "gb", "tb", "pb", "m", "h", "d"}
)

Rule = Callable[[MetricDescriptor], List[str]]


def lint_help(descriptor: MetricDescriptor) -> List[str]:
    if not descriptor.help:
        return ["no help text"]
    return []


def lint_metric_units(descriptor: MetricDescriptor) -> List[str]:
    found = metric_units(descriptor.name)
    if found is None:
        return []
    unit, base = found
    if unit == base:
        return []
    return [f'use base unit "{base}" instead of "{unit}"']


def lint_counter(descriptor: MetricDescriptor) -> List[str]:
    is_counter = descriptor.kind is MetricKind.COUNTER
    is_untyped = descriptor.kind is MetricKind.UNTYPED
    has_total = descriptor.name.endswith("_total")
    if is_counter and not has_total:
        return ['counter metrics should have "_total" suffix']
    if not is_untyped and not is_counter and has_total:
        return ['non-counter metrics should not have "_total" suffix']
    return []


def lint_histogram_summary_reserved(descriptor: MetricDescriptor) -> List[str]:
    kind = descriptor.kind
    if kind is MetricKind.UNTYPED:
        return []
    is_histogram = kind is MetricKind.HISTOGRAM
    is_summary = kind is MetricKind.SUMMARY
    name = descriptor.name
    problems: List[str] = []
    if not is_histogram and name.endswith("_bucket"):
        problems.append('non-histogram metrics should not have "_bucket" suffix')
    if not is_histogram and not is_summary and name.endswith("_count"):
        problems.append('non-histogram and non-summary metrics should not have "_count" suffix')
    if not is_histogram and not is_summary and name.endswith("_sum"):
        problems.append('non-histogram and non-summary metrics should not have "_sum" suffix')
    return problems


def lint_metric_type_in_name(descriptor: MetricDescriptor) -> List[str]:
    kind = descriptor.kind
    if kind is None or kind is MetricKind.UNTYPED:
        return []
    type_name = kind.value
    name = descriptor.name.lower()
    if f"_{type_name}_" in name or name.endswith(f"_{type_name}"):
        return [f"metric name should not include type '{type_name}'"]
    return []


def lint_reserved_chars(descriptor: MetricDescriptor) -> List[str]:
    if ":" in descriptor.name:
        return ["metric names should not contain ':'"]
    return []


def lint_camel_case(descriptor: MetricDescriptor) -> List[str]:
    if _CAMEL_CASE.search(descriptor.name):
        return ["metric names should be written in 'snake_case' not 'camelCase'"]
    return []


def lint_unit_abbreviations(descriptor: MetricDescriptor) -> List[str]:
    name = descriptor.name.lower()
    if any(f"_{unit}_" in name or name.endswith(f"_{unit}") for unit in _UNIT_ABBREVIATIONS):
        return ["metric names should not contain abbreviated units"]
    return []


def metric_units(name: str) -> Optional[Tuple[str, str]]:
    """Return ``(unit, base unit)`` for the first unit-like part of ``name``."""
    for part in name.split("_"):
        if part in _UNITS:
            return part, _UNITS[part]
        for prefix in _UNIT_PREFIXES:
            if part.startswith(prefix) and part[len(prefix):] in _UNITS:
                return part, _UNITS[part[len(prefix):]]
    return None


RULES: Dict[str, Rule] = {
    "help": lint_help,
    "metric_units": lint_metric_units,
    "counter": lint_counter,
    "histogram_summary_reserved": lint_histogram_summary_reserved,
    "metric_type_in_name": lint_metric_type_in_name,
    "reserved_chars": lint_reserved_chars,
    "camel_case": lint_camel_case,
    "unit_abbreviations": lint_unit_abbreviations,
}


class PromLintValidator(Validator):
    """Judges a single metric descriptor against the promlint rule set."""

    name = "promlint"

    def __init__(self, *, disabled_rules: Collection[str] = ()) -> None:
        unknown = sorted(set(disabled_rules) - set(RULES))
        if unknown:
            raise ValueError(f"Unknown lint rules: {', '.join(unknown)}")
        self._rules = [(name, rule) for name, rule in RULES.items() if name not in disabled_rules]

    def validate(self, descriptor: MetricDescriptor) -> List[Problem]:
        check_descriptor(descriptor)
        problems = [
            Problem(metric=descriptor.name, text=text, rule=rule_name)
            for rule_name, rule in self._rules
            for text in rule(descriptor)
        ]
        problems.sort(key=lambda problem: (problem.metric, problem.text))
        return problems


__all__ = ["PromLintValidator", "RULES", "metric_units"]

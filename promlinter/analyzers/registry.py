"""Constructor tables recognised by the metric analyzers."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..models import MetricKind

METRIC_CONSTRUCTORS: Mapping[str, MetricKind] = MappingProxyType(
    {
        "NewCounter": MetricKind.COUNTER,
        "NewCounterVec": MetricKind.COUNTER,
        "NewGauge": MetricKind.GAUGE,
        "NewGaugeVec": MetricKind.GAUGE,
        "NewHistogram": MetricKind.HISTOGRAM,
        "NewHistogramVec": MetricKind.HISTOGRAM,
        "NewSummary": MetricKind.SUMMARY,
        "NewSummaryVec": MetricKind.SUMMARY,
    }
)

CONST_METRIC_ARGS: Mapping[str, int] = MappingProxyType(
    {
        "MustNewConstMetric": 3,
        "MustNewHistogram": 4,
        "MustNewSummary": 4,
    }
)

CONST_METRIC_KINDS: Mapping[str, MetricKind] = MappingProxyType(
    {
        "MustNewHistogram": MetricKind.HISTOGRAM,
        "MustNewSummary": MetricKind.SUMMARY,
    }
)

VALUE_TYPE_KINDS: Mapping[str, MetricKind] = MappingProxyType(
    {
        "CounterValue": MetricKind.COUNTER,
        "GaugeValue": MetricKind.GAUGE,
    }
)

# ConstLabels is left out on purpose: it carries no naming information.
OPTION_FIELDS: frozenset[str] = frozenset({"Namespace", "Subsystem", "Name", "Help"})

DESC_CONSTRUCTOR_ARGS = 4
VEC_SUFFIX = "Vec"


def required_args(constructor: str) -> int:
    """Minimum argument count of a direct constructor."""
    return 2 if constructor.endswith(VEC_SUFFIX) else 1


def value_type_kind(name: str) -> MetricKind:
    """Map a ``prometheus.ValueType`` identifier to a metric kind."""
    return VALUE_TYPE_KINDS.get(name, MetricKind.UNTYPED)


__all__ = [
    "CONST_METRIC_ARGS",
    "CONST_METRIC_KINDS",
    "DESC_CONSTRUCTOR_ARGS",
    "METRIC_CONSTRUCTORS",
    "OPTION_FIELDS",
    "VALUE_TYPE_KINDS",
    "required_args",
    "value_type_kind",
]

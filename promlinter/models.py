"""Core data models shared across promlinter components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SourcePosition:
    """File, line and column of a node, ordered by its rendered text."""

    file: str
    line: int
    column: int

    def __str__(self) -> str:
        if self.line <= 0:
            return self.file or "-"
        if not self.file:
            return f"{self.line}:{self.column}"
        return f"{self.file}:{self.line}:{self.column}"


class MetricKind(str, Enum):
    """Prometheus metric family types."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"
    UNTYPED = "untyped"


@dataclass
class OptionRecord:
    """Naming fields read from a metric options struct literal."""

    namespace: str = ""
    subsystem: str = ""
    name: str = ""


@dataclass
class MetricDescriptor:
    """Resolved kind, fully qualified name and help text of one instrument."""

    kind: Optional[MetricKind]
    name: str
    help: str = ""


@dataclass(eq=False)
class Occurrence:
    """One call or send site that produced a metric descriptor.

    Occurrences compare by identity: two sites declaring the same metric are
    reported independently.
    """

    descriptor: MetricDescriptor
    position: SourcePosition


@dataclass
class Issue:
    """A diagnostic reported at a source position."""

    position: SourcePosition
    text: str
    metric: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "file": self.position.file,
            "line": self.position.line,
            "column": self.position.column,
            "metric": self.metric,
            "text": self.text,
        }


@dataclass
class Problem:
    """Naming or documentation problem reported by a semantic validator."""

    metric: str
    text: str
    rule: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty name segments with underscores."""
    return "_".join(part for part in (namespace, subsystem, name) if part)

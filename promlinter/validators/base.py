"""Core validation contracts for metric descriptors."""

from __future__ import annotations

from typing import List, Protocol

from ..models import MetricDescriptor, Problem


class DescriptorError(RuntimeError):
    """Raised when a validator is handed a descriptor it cannot judge.

    This signals a bug in descriptor construction and must abort the run.
    """


class Validator(Protocol):
    """Protocol implemented by metric descriptor validators."""

    name: str

    def validate(self, descriptor: MetricDescriptor) -> List[Problem]:
        """Return the naming and documentation problems of ``descriptor``."""


def check_descriptor(descriptor: MetricDescriptor) -> None:
    """Reject descriptors missing the fields every validator relies on."""
    if descriptor.kind is None:
        raise DescriptorError(f"metric {descriptor.name!r} has no type")
    if descriptor.name is None:
        raise DescriptorError("metric has no name")

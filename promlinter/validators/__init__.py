"""Semantic validators for resolved metric descriptors."""

from .base import DescriptorError, Validator, check_descriptor
from .promlint import RULES, PromLintValidator

__all__ = [
    "DescriptorError",
    "PromLintValidator",
    "RULES",
    "Validator",
    "check_descriptor",
]

"""Metric declaration analyzers over Go syntax trees."""

from ..syntax.literals import MalformedLiteralError, unquote
from .options import ExtractedOptions, OptionsExtractor
from .resolver import LiteralResolver, Resolution
from .visitor import MetricVisitor, build_descriptor, callee_name

__all__ = [
    "ExtractedOptions",
    "LiteralResolver",
    "MalformedLiteralError",
    "MetricVisitor",
    "OptionsExtractor",
    "Resolution",
    "build_descriptor",
    "callee_name",
    "unquote",
]

"""Metadata analysis and example inference."""

from .documentation import strip_example_markers
from .examples import ExampleMiner
from .metadata import DEFAULT_LAZY_FIELDS, DEFAULT_ROOT, MetadataAnalyzer

__all__ = [
    "DEFAULT_LAZY_FIELDS",
    "DEFAULT_ROOT",
    "ExampleMiner",
    "MetadataAnalyzer",
    "strip_example_markers",
]

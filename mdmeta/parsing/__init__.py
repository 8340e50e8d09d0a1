"""Line classification and structural parsing of annotated Markdown."""

from .classifier import classify, classify_lines, split_lines
from .structure import Phase, parse

__all__ = ["Phase", "classify", "classify_lines", "parse", "split_lines"]

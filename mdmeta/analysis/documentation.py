"""Rendering cleanup for documentation text."""

from __future__ import annotations

import re

_MARKER_LINE = re.compile(r"^::$", re.MULTILINE)
_TRAILING_MARKER = re.compile(r":{2,}[ \t]*$", re.MULTILINE)


def strip_example_markers(documentation: str) -> str:
    """Drop lines that are exactly ``::`` and turn a trailing ``::`` into ``:``.

    A whole trailing run of colons collapses to one, so applying the rewrite
    twice gives the same text as applying it once.
    """
    without_marker_lines = _MARKER_LINE.sub("", documentation)
    return _TRAILING_MARKER.sub(":", without_marker_lines)


__all__ = ["strip_example_markers"]

"""Line classification for annotated Markdown documents."""

from __future__ import annotations

import re
from typing import Iterator

from ..models import (
    EndOfInput,
    EntityDirective,
    GuideDirective,
    LineKind,
    PlainLine,
    Separator,
)

_ENTITY_PATTERN = re.compile(r"^@annotate:\s*(.+)")
_GUIDE_PATTERN = re.compile(r"^@guide:\s*(.+)")
_SEPARATOR_PATTERN = re.compile(r"^---+\s*$")
_LINE_BREAK = re.compile(r"\r\n|\n\r|\r|\n")


def classify(line: str) -> LineKind:
    """Return the kind of a single line; directive-like lines that fail to match are plain."""
    match = _ENTITY_PATTERN.match(line)
    if match:
        return EntityDirective(match.group(1))
    match = _GUIDE_PATTERN.match(line)
    if match:
        return GuideDirective(match.group(1))
    if _SEPARATOR_PATTERN.match(line):
        return Separator()
    return PlainLine(line)


def split_lines(text: str) -> list[str]:
    """Split on any line-break convention. An empty document has no lines."""
    if not text:
        return []
    return _LINE_BREAK.split(text)


def classify_lines(text: str) -> Iterator[LineKind]:
    """Yield one kind per line followed by a trailing EndOfInput."""
    for line in split_lines(text):
        yield classify(line)
    yield EndOfInput()


__all__ = ["classify", "classify_lines", "split_lines"]

"""Example mining from documentation prose."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from markdown_it import MarkdownIt

from ..models import ExampleCandidate

_MARKER_PATTERN = re.compile(r"::\s*$")

# Python has no empty statement, so blocks are joined with a blank line both
# at heading boundaries and in the trailing flush.
_SOURCE_JOINER = "\n\n"


@dataclass(frozen=True)
class Heading:
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class Other:
    kind: str = ""


Block = Union[Heading, Paragraph, Code, Other]


def is_example_marker(text: str) -> bool:
    """Return True when ``text`` ends with the ``::`` "example follows" marker."""
    return bool(_MARKER_PATTERN.search(text))


@dataclass
class _Fold:
    examples: List[ExampleCandidate] = field(default_factory=list)
    source: List[str] = field(default_factory=list)
    heading: Optional[str] = None
    next_is_example: bool = False


class ExampleMiner:
    """Collects fenced code that directly follows a ``::`` paragraph or heading."""

    def __init__(self) -> None:
        self._markdown = MarkdownIt("commonmark")

    def lex(self, documentation: str) -> List[Block]:
        """Return the top-level block structure of ``documentation``."""
        tokens = self._markdown.parse(documentation)
        blocks: List[Block] = []
        for index, token in enumerate(tokens):
            if token.level != 0 or token.nesting == -1:
                continue
            if token.type == "heading_open":
                blocks.append(Heading(tokens[index + 1].content))
            elif token.type == "paragraph_open":
                blocks.append(Paragraph(tokens[index + 1].content))
            elif token.type in {"fence", "code_block"}:
                blocks.append(Code(token.content.rstrip()))
            else:
                blocks.append(Other(token.type))
        return blocks

    def mine(self, documentation: str) -> List[ExampleCandidate]:
        """Return example candidates in document order."""
        state = _Fold()
        for block in self.lex(documentation):
            if isinstance(block, Code):
                if state.next_is_example:
                    state.source.append(block.text)
                state.next_is_example = False
            elif isinstance(block, Heading):
                self._close(state)
                state.heading = block.text
                state.next_is_example = is_example_marker(block.text)
            elif isinstance(block, Paragraph):
                state.next_is_example = is_example_marker(block.text)
            else:
                state.next_is_example = False
        self._close(state)
        return state.examples

    @staticmethod
    def _close(state: _Fold) -> None:
        # Headings with no captured code close nothing.
        if state.source:
            state.examples.append(
                ExampleCandidate(heading=state.heading, source=_SOURCE_JOINER.join(state.source))
            )
        state.source = []


__all__ = ["Block", "Code", "ExampleMiner", "Heading", "Other", "Paragraph", "is_example_marker"]

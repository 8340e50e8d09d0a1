"""Core data models shared across mdmeta components."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


# Line kinds produced by the block classifier. The set is closed: the parser
# dispatch table is checked against LINE_KINDS at import time.


@dataclass(frozen=True)
class EntityDirective:
    """`@annotate: <reference>` line."""

    reference: str


@dataclass(frozen=True)
class GuideDirective:
    """`@guide: <title>` line."""

    title: str


@dataclass(frozen=True)
class Separator:
    """Line of three or more dashes closing a metadata block."""


@dataclass(frozen=True)
class PlainLine:
    """Any other line of text."""

    text: str


@dataclass(frozen=True)
class EndOfInput:
    """Synthetic marker appended after the last line."""


LineKind = Union[EntityDirective, GuideDirective, Separator, PlainLine, EndOfInput]

LINE_KINDS: Tuple[type, ...] = (EntityDirective, GuideDirective, Separator, PlainLine, EndOfInput)


@dataclass(frozen=True)
class EntityRecord:
    """Annotation bound to one or more symbol references."""

    references: Tuple[str, ...]
    metadata: str = ""
    documentation: str = ""
    is_multi_ref: bool = False
    line: int = 0
    reference_lines: Tuple[int, ...] = ()
    metadata_line: Optional[int] = None

    @property
    def reference(self) -> Union[str, Tuple[str, ...]]:
        """Single reference, or the ordered group for multi-ref records."""
        if self.is_multi_ref:
            return self.references
        return self.references[0]


@dataclass(frozen=True)
class GuideRecord:
    """Annotation describing a standalone guide document."""

    title: str
    metadata: str = ""
    documentation: str = ""
    line: int = 0
    metadata_line: Optional[int] = None


AnnotationRecord = Union[EntityRecord, GuideRecord]


@dataclass(frozen=True)
class ExampleCandidate:
    """Source text mined from documentation prose."""

    heading: Optional[str]
    source: str


@dataclass(frozen=True, eq=False)
class Raw:
    """Pre-built code emitted verbatim instead of as a literal."""

    node: ast.AST
    source: str = ""

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Raw":
        # Immutable handle; the emitter copies the node before hoisting it.
        return self


@dataclass(frozen=True, eq=False)
class Lazy:
    """Expression evaluated on access so forward references stay valid."""

    source: str
    expression: ast.expr

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Lazy":
        return self


@dataclass(frozen=True, eq=False)
class EntityTarget:
    """Symbol a metadata unit is attached to."""

    reference: str
    expression: ast.expr
    line: int = 0


@dataclass(frozen=True, eq=False)
class GuideTarget:
    """Guide registered under `parent` with `title` as its key."""

    title: str
    parent: str
    parent_expression: ast.expr
    line: int = 0


Target = Union[EntityTarget, GuideTarget]


@dataclass(frozen=True)
class MetadataUnit:
    """Resolved metadata for one symbol or guide, ready for emission."""

    target: Target
    fields: Dict[str, Any] = field(default_factory=dict)


__all__ = [
    "AnnotationRecord",
    "EndOfInput",
    "EntityDirective",
    "EntityRecord",
    "EntityTarget",
    "ExampleCandidate",
    "GuideDirective",
    "GuideRecord",
    "GuideTarget",
    "LINE_KINDS",
    "Lazy",
    "LineKind",
    "MetadataUnit",
    "PlainLine",
    "Raw",
    "Separator",
    "Target",
]

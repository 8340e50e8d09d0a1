"""Structural parser folding classified lines into annotation records.

The parser is a small finite-state machine. After a directive it is in an
annotation phase (``ENTITY`` or ``GUIDE``) and every plain line is metadata;
a separator moves it back to ``IDLE`` where plain lines become documentation
for the same record. Consecutive ``@annotate:`` lines share a single record
until the first plain line seals it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..errors import StructuralError
from ..models import (
    LINE_KINDS,
    AnnotationRecord,
    EndOfInput,
    EntityDirective,
    EntityRecord,
    GuideDirective,
    GuideRecord,
    LineKind,
    PlainLine,
    Separator,
)
from .classifier import classify_lines


class Phase(Enum):
    """Annotation phase of the parser."""

    IDLE = "idle"
    ENTITY = "entity"
    GUIDE = "guide"


@dataclass
class _Draft:
    """Record under construction."""

    phase: Phase
    line: int
    references: List[str] = field(default_factory=list)
    reference_lines: List[int] = field(default_factory=list)
    title: Optional[str] = None
    metadata: List[str] = field(default_factory=list)
    documentation: List[str] = field(default_factory=list)
    metadata_line: Optional[int] = None
    sealed: bool = False

    def build(self) -> AnnotationRecord:
        if self.phase is Phase.GUIDE:
            return GuideRecord(
                title=self.title or "",
                metadata="\n".join(self.metadata),
                documentation="\n".join(self.documentation),
                line=self.line,
                metadata_line=self.metadata_line,
            )
        return EntityRecord(
            references=tuple(self.references),
            metadata="\n".join(self.metadata),
            documentation="\n".join(self.documentation),
            is_multi_ref=len(self.references) > 1,
            line=self.line,
            reference_lines=tuple(self.reference_lines),
            metadata_line=self.metadata_line,
        )


@dataclass
class _State:
    phase: Phase = Phase.IDLE
    current: Optional[_Draft] = None
    completed: List[AnnotationRecord] = field(default_factory=list)

    def push(self) -> None:
        if self.current is not None:
            self.completed.append(self.current.build())
        self.current = None


def _on_entity(state: _State, node: EntityDirective, line: int) -> None:
    if state.phase is Phase.GUIDE:
        raise StructuralError("multiple annotations only supported for entities", line=line)
    draft = state.current
    if state.phase is Phase.ENTITY and draft is not None:
        if draft.sealed:
            raise StructuralError(
                "multiple annotations must follow each other immediately",
                line=line,
                excerpt=f"@annotate: {node.reference}",
            )
        draft.references.append(node.reference)
        draft.reference_lines.append(line)
        return
    state.push()
    state.current = _Draft(
        phase=Phase.ENTITY,
        line=line,
        references=[node.reference],
        reference_lines=[line],
    )
    state.phase = Phase.ENTITY


def _on_guide(state: _State, node: GuideDirective, line: int) -> None:
    if state.phase is not Phase.IDLE:
        raise StructuralError(
            "multiple annotations not supported for guides",
            line=line,
            excerpt=f"@guide: {node.title}",
        )
    state.push()
    state.current = _Draft(phase=Phase.GUIDE, line=line, title=node.title)
    state.phase = Phase.GUIDE


def _on_separator(state: _State, node: Separator, line: int) -> None:
    if state.current is None:
        raise StructuralError("separator without entity", line=line)
    state.phase = Phase.IDLE


def _on_plain(state: _State, node: PlainLine, line: int) -> None:
    current = state.current
    if current is None:
        raise StructuralError("documentation before annotation", line=line, excerpt=node.text)
    if state.phase is Phase.IDLE:
        current.documentation.append(node.text)
    else:
        if current.metadata_line is None:
            current.metadata_line = line
        current.metadata.append(node.text)
    current.sealed = True


def _on_end(state: _State, node: EndOfInput, line: int) -> None:
    state.push()
    state.phase = Phase.IDLE


_TRANSITIONS: Dict[type, Callable[[_State, LineKind, int], None]] = {
    EntityDirective: _on_entity,  # type: ignore[dict-item]
    GuideDirective: _on_guide,  # type: ignore[dict-item]
    Separator: _on_separator,  # type: ignore[dict-item]
    PlainLine: _on_plain,  # type: ignore[dict-item]
    EndOfInput: _on_end,  # type: ignore[dict-item]
}

_missing = set(LINE_KINDS) - set(_TRANSITIONS)
if _missing:  # pragma: no cover - guards additions to LINE_KINDS
    raise RuntimeError(f"No parser transition for line kinds: {sorted(k.__name__ for k in _missing)}")


def parse(text: str) -> List[AnnotationRecord]:
    """Return the annotation records of ``text`` in document order.

    Raises StructuralError, with the 1-indexed line, on the first grammar
    violation.
    """
    state = _State()
    for line, node in enumerate(classify_lines(text), start=1):
        _TRANSITIONS[type(node)](state, node, line)
    return state.completed


__all__ = ["Phase", "parse"]

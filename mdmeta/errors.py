"""Error taxonomy for the annotation compiler."""

from __future__ import annotations

from typing import Optional


class CompileError(Exception):
    """Base class for failures that abort compilation of a document.

    Carries enough context to localise the fault: the document it came from,
    the 1-indexed line and an optional excerpt of the offending text. The
    document is usually attached by the compiler after the fact, since the
    parsing and analysis stages only ever see text.
    """

    def __init__(
        self,
        message: str,
        *,
        document: Optional[str] = None,
        line: Optional[int] = None,
        excerpt: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.document = document
        self.line = line
        self.excerpt = excerpt

    def __str__(self) -> str:
        location = ":".join(
            str(part) for part in (self.document, self.line) if part is not None
        )
        text = f"{location}: {self.message}" if location else self.message
        if self.excerpt:
            text = f"{text}\n\n{self.excerpt}"
        return text


class StructuralError(CompileError):
    """Raised when directives, separators and text violate the document grammar."""


class MetadataParseError(CompileError):
    """Raised when a metadata block is not valid YAML or not a mapping."""


class ExpressionParseError(CompileError):
    """Raised when a reference or example does not parse as Python."""

    def __init__(
        self,
        message: str,
        *,
        column: Optional[int] = None,
        document: Optional[str] = None,
        line: Optional[int] = None,
        excerpt: Optional[str] = None,
    ) -> None:
        super().__init__(message, document=document, line=line, excerpt=excerpt)
        self.column = column


class UnsupportedValueError(CompileError, TypeError):
    """Raised when a metadata value has no literal representation."""


__all__ = [
    "CompileError",
    "ExpressionParseError",
    "MetadataParseError",
    "StructuralError",
    "UnsupportedValueError",
]

"""Metadata analysis: YAML fields, inference and multi-reference expansion."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml

from ..errors import ExpressionParseError, MetadataParseError, UnsupportedValueError
from ..logging import get_logger
from ..models import (
    AnnotationRecord,
    EntityTarget,
    GuideRecord,
    GuideTarget,
    Lazy,
    MetadataUnit,
    Raw,
)
from .documentation import strip_example_markers
from .examples import ExampleMiner
from .expressions import compile_example, parse_expression

DEFAULT_ROOT = "root"
DEFAULT_LAZY_FIELDS = ("~belongsTo",)
GUIDES_MODULE = "guides"


class MetadataAnalyzer:
    """Turns annotation records into metadata units ready for emission."""

    def __init__(
        self,
        *,
        root: str = DEFAULT_ROOT,
        lazy_fields: Iterable[str] = DEFAULT_LAZY_FIELDS,
        miner: ExampleMiner | None = None,
    ) -> None:
        self.root = root
        self.lazy_fields = frozenset(lazy_fields)
        self.miner = miner or ExampleMiner()
        self.logger = get_logger("analysis")

    def analyze(self, records: Sequence[AnnotationRecord]) -> List[MetadataUnit]:
        """Return the units for all records in order; the first failure propagates."""
        units: List[MetadataUnit] = []
        for record in records:
            units.extend(self.analyze_record(record))
        return units

    def analyze_record(self, record: AnnotationRecord) -> List[MetadataUnit]:
        metadata = self.parse_metadata(record.metadata, line=record.metadata_line)

        if isinstance(record, GuideRecord):
            parent = metadata.get("parent") or self.root
            if not isinstance(parent, str):
                raise UnsupportedValueError(
                    f"Guide parent must be an expression string, got {type(parent).__name__}",
                    line=record.line,
                )
            fields = self.infer(
                {
                    **metadata,
                    "documentation": record.documentation,
                    "name": record.title,
                    "module": GUIDES_MODULE,
                },
                line=record.line,
            )
            target = GuideTarget(
                title=record.title,
                parent=parent,
                parent_expression=parse_expression(parent, what="guide parent", line=record.line),
                line=record.line,
            )
            return [MetadataUnit(target=target, fields=fields)]

        metadata["documentation"] = record.documentation
        fields = self.infer(metadata, line=record.line)
        lines = record.reference_lines or (record.line,) * len(record.references)
        units: List[MetadataUnit] = []
        for reference, line in zip(record.references, lines):
            expression = parse_expression(reference, what="reference", line=line)
            target = EntityTarget(reference=reference.strip(), expression=expression, line=line)
            units.append(MetadataUnit(target=target, fields=copy.deepcopy(fields)))
        if record.is_multi_ref:
            self.logger.debug(
                "Expanded multi-reference annotation at line %d into %d units",
                record.line,
                len(units),
            )
        return units

    def parse_metadata(self, text: str, *, line: Optional[int] = None) -> Dict[str, Any]:
        """Parse a YAML metadata block; an empty block is an empty mapping."""
        if not text.strip():
            return {}
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            error_line = line
            if mark is not None and line is not None:
                error_line = line + mark.line
            problem = getattr(exc, "problem", None) or str(exc)
            raise MetadataParseError(
                f"Invalid metadata block: {problem}", line=error_line, excerpt=text
            ) from exc
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise MetadataParseError(
                f"Metadata block must be a mapping, got {type(loaded).__name__}",
                line=line,
                excerpt=text,
            )
        return self._resolve_lazy(loaded, line=line)

    def infer(self, fields: Dict[str, Any], *, line: Optional[int] = None) -> Dict[str, Any]:
        """Apply deprecation and example inference, then clean up the documentation."""
        result = dict(fields)
        if result.get("deprecated"):
            result["stability"] = "deprecated"

        documentation = result.get("documentation")
        if documentation:
            examples = self._infer_examples(documentation, line=line)
            if examples:
                result["examples"] = examples
            result["documentation"] = strip_example_markers(documentation)
        return result

    def _infer_examples(self, documentation: str, *, line: Optional[int]) -> List[Dict[str, Any]]:
        examples: List[Dict[str, Any]] = []
        for candidate in self.miner.mine(documentation):
            name = candidate.heading or ""
            try:
                function = compile_example(candidate.source, what=f"example {name!r}")
            except ExpressionParseError as exc:
                exc.line = line
                raise
            examples.append(
                {
                    "name": name,
                    "source": candidate.source,
                    "call": Raw(node=function, source=candidate.source),
                    "inferred": True,
                }
            )
        return examples

    def _resolve_lazy(self, mapping: Dict[Any, Any], *, line: Optional[int]) -> Dict[Any, Any]:
        resolved: Dict[Any, Any] = {}
        for key, value in mapping.items():
            if key in self.lazy_fields:
                if not isinstance(value, str):
                    raise UnsupportedValueError(
                        f"Field {key!r} expects an expression string, got {type(value).__name__}",
                        line=line,
                    )
                resolved[key] = Lazy(
                    source=value,
                    expression=parse_expression(value, what=f"field {key!r}", line=line),
                )
            else:
                resolved[key] = self._resolve_nested(value, line=line)
        return resolved

    def _resolve_nested(self, value: Any, *, line: Optional[int]) -> Any:
        if isinstance(value, dict):
            return self._resolve_lazy(value, line=line)
        if isinstance(value, list):
            return [self._resolve_nested(item, line=line) for item in value]
        return value


__all__ = ["DEFAULT_LAZY_FIELDS", "DEFAULT_ROOT", "GUIDES_MODULE", "MetadataAnalyzer"]

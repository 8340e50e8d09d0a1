"""Python module emitter for metadata units."""

from __future__ import annotations

import ast
import copy
from typing import Any, List, Mapping, Optional, cast

from ..analysis.expressions import lazy_expression
from ..errors import UnsupportedValueError
from ..models import EntityTarget, Lazy, Raw, Target
from .base import Emitter

RUNTIME_MODULE = "mdmeta.runtime"
ENTRY_POINT = "annotate"
_META_PARAM = "meta"
_RUNTIME_NAMES = ("ensure_guide", "with_meta")
# Names the root parameter of the entry point must not shadow.
RESERVED_NAMES = frozenset({_META_PARAM, *_RUNTIME_NAMES})


def _name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def _call(func: ast.expr, *args: ast.expr) -> ast.Call:
    return ast.Call(func=func, args=list(args), keywords=[])


def _method(value: ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(value=value, attr=attr, ctx=ast.Load())


class PythonModuleEmitter(Emitter):
    """Collects emitted units into the body of an ``annotate(meta, root)`` function.

    Each unit becomes ``meta.for_(<target>).update({...})``. Guides are
    registered through ``ensure_guide(<parent>, <title>)``. Example functions
    are hoisted above the statement that references them.
    """

    def __init__(self, *, root: str = "root", source_name: Optional[str] = None) -> None:
        self.root = root
        self.source_name = source_name
        self._statements: List[ast.stmt] = []
        self._examples = 0

    def emit(self, target: Target, fields: Mapping[str, Any]) -> None:
        prelude: List[ast.stmt] = []
        payload = self._mapping(fields, prelude)
        if isinstance(target, EntityTarget):
            subject: ast.expr = copy.deepcopy(target.expression)
        else:
            subject = _call(
                _name("ensure_guide"),
                copy.deepcopy(target.parent_expression),
                ast.Constant(target.title),
            )
        binding = _call(_method(_name(_META_PARAM), "for_"), subject)
        self._statements.extend(prelude)
        self._statements.append(ast.Expr(_call(_method(binding, "update"), payload)))

    def render(self) -> str:
        """Return the source of the generated module."""
        origin = f" from {self.source_name}" if self.source_name else ""
        header = ast.parse(
            f'"""Metadata generated by mdmeta{origin}. Do not edit."""\n'
            f"from {RUNTIME_MODULE} import {', '.join(_RUNTIME_NAMES)}\n"
        )
        function = cast(
            ast.FunctionDef,
            ast.parse(f"def {ENTRY_POINT}({_META_PARAM}, {self.root}):\n    pass").body[0],
        )
        if self._statements:
            function.body = list(self._statements)
        module = ast.Module(body=[*header.body, function], type_ignores=[])
        return ast.unparse(ast.fix_missing_locations(module)) + "\n"

    def _mapping(self, mapping: Mapping[Any, Any], prelude: List[ast.stmt]) -> ast.Dict:
        keys: List[Optional[ast.expr]] = []
        values: List[ast.expr] = []
        for key, value in mapping.items():
            if isinstance(key, bool) or not isinstance(key, (str, int, float)):
                raise UnsupportedValueError(f"Type of field name not supported: {key!r}")
            keys.append(ast.Constant(key))
            values.append(self._value(value, prelude, key=key))
        return ast.Dict(keys=keys, values=values)

    def _value(self, value: Any, prelude: List[ast.stmt], *, key: Any = None) -> ast.expr:
        if isinstance(value, Raw):
            return self._raw(value, prelude)
        if isinstance(value, Lazy):
            return lazy_expression(copy.deepcopy(value.expression))
        if isinstance(value, (str, bool, int, float)):
            return ast.Constant(value)
        if isinstance(value, (list, tuple)):
            return ast.List(elts=[self._value(item, prelude) for item in value], ctx=ast.Load())
        if isinstance(value, dict):
            return self._mapping(value, prelude)
        label = f"field {key!r}" if key is not None else "value"
        raise UnsupportedValueError(
            f"Type of {label} not supported: {type(value).__name__} ({value!r})"
        )

    def _raw(self, value: Raw, prelude: List[ast.stmt]) -> ast.expr:
        node = value.node
        if isinstance(node, ast.FunctionDef):
            self._examples += 1
            function = copy.deepcopy(node)
            function.name = f"_example_{self._examples}"
            prelude.append(function)
            meta = ast.Dict(keys=[ast.Constant("source")], values=[ast.Constant(value.source)])
            return _call(_name("with_meta"), _name(function.name), meta)
        if isinstance(node, ast.expr):
            return copy.deepcopy(node)
        raise UnsupportedValueError(f"Raw node cannot be emitted as a value: {type(node).__name__}")


__all__ = ["ENTRY_POINT", "PythonModuleEmitter", "RESERVED_NAMES", "RUNTIME_MODULE"]

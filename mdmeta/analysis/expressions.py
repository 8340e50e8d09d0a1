"""Python parsing service for references, lazy fields and examples."""

from __future__ import annotations

import ast
import re
from typing import List, Optional, cast

from ..errors import ExpressionParseError

_AWAIT_PATTERN = re.compile(r"\bawait\b")
_ASYNC_RUNNER = "_run_example"
_SNIPPET_CONTEXT = 2


def format_snippet(source: str, line: int, column: int) -> str:
    """Return the lines around ``line`` with a caret under ``column`` (both 1-indexed)."""
    lines = source.splitlines() or [""]
    line = min(max(line, 1), len(lines))
    before = lines[max(line - 1 - _SNIPPET_CONTEXT, 0) : line - 1]
    after = lines[line : line + _SNIPPET_CONTEXT]
    caret = " " * max(column - 1, 0) + "^"
    return "\n".join([*before, lines[line - 1], caret, *after])


def _parse_error(
    exc: SyntaxError,
    source: str,
    *,
    what: str,
    line: Optional[int],
) -> ExpressionParseError:
    relative_line = max(exc.lineno or 1, 1)
    column = max(exc.offset or 1, 1)
    absolute_line = line + relative_line - 1 if line is not None else relative_line
    return ExpressionParseError(
        f"Unable to parse {what}: {exc.msg} (line {relative_line}, column {column})",
        column=column,
        line=absolute_line,
        excerpt=format_snippet(source, relative_line, column),
    )


def parse_expression(source: str, *, what: str = "expression", line: Optional[int] = None) -> ast.expr:
    """Parse a single Python expression such as ``root.maybe.Just``."""
    text = source.strip()
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise _parse_error(exc, text, what=what, line=line) from exc
    return tree.body


def parse_statements(source: str, *, what: str = "statements", line: Optional[int] = None) -> List[ast.stmt]:
    """Parse a block of Python statements."""
    try:
        tree = ast.parse(source, mode="exec")
    except SyntaxError as exc:
        raise _parse_error(exc, source, what=what, line=line) from exc
    return tree.body


def uses_await(source: str) -> bool:
    return bool(_AWAIT_PATTERN.search(source))


def compile_example(source: str, *, name: str = "_example", what: str = "example") -> ast.FunctionDef:
    """Return a zero-argument function definition running ``source``.

    Sources that ``await`` are parsed once and moved into an inner async
    function whose invocation is returned, so calling the example yields a
    coroutine instead of failing to compile.
    """
    body = parse_statements(source, what=what)
    if uses_await(source):
        runner = cast(ast.AsyncFunctionDef, _statement(f"async def {_ASYNC_RUNNER}():\n    pass"))
        if body:
            runner.body = body
        invocation = ast.Call(func=ast.Name(id=_ASYNC_RUNNER, ctx=ast.Load()), args=[], keywords=[])
        body = [runner, ast.Return(value=invocation)]

    function = cast(ast.FunctionDef, _statement(f"def {name}():\n    pass"))
    if body:
        function.body = body
    return function


def lazy_expression(expression: ast.expr) -> ast.Lambda:
    """Wrap ``expression`` in a zero-argument lambda."""
    node = cast(ast.Lambda, ast.parse("lambda: None", mode="eval").body)
    node.body = expression
    return node


def _statement(source: str) -> ast.stmt:
    return ast.parse(source, mode="exec").body[0]


__all__ = [
    "compile_example",
    "format_snippet",
    "lazy_expression",
    "parse_expression",
    "parse_statements",
    "uses_await",
]

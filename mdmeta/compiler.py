"""Compilation pipeline from annotated Markdown to metadata modules."""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from .analysis.metadata import DEFAULT_LAZY_FIELDS, DEFAULT_ROOT, MetadataAnalyzer
from .config import MdMetaConfig, load_config
from .emit import EmissionDriver, PythonModuleEmitter
from .errors import CompileError
from .logging import get_logger
from .models import AnnotationRecord, MetadataUnit
from .parsing import parse

_T = TypeVar("_T")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
}


@dataclass
class Compilation:
    """In-memory result of compiling one document."""

    records: List[AnnotationRecord]
    units: List[MetadataUnit]
    code: str


@dataclass
class CompiledDocument:
    """Summary of a document compiled to disk."""

    source: Path
    output: Path
    records: int
    units: int


def compile_document(
    text: str,
    *,
    document: Optional[str] = None,
    root: str = DEFAULT_ROOT,
    lazy_fields: Iterable[str] = DEFAULT_LAZY_FIELDS,
) -> Compilation:
    """Parse, analyze and emit one document.

    Any CompileError raised along the way is re-raised with ``document``
    attached; there is no partial result.
    """
    try:
        records = parse(text)
        units = MetadataAnalyzer(root=root, lazy_fields=lazy_fields).analyze(records)
        emitter = PythonModuleEmitter(root=root, source_name=document)
        EmissionDriver(emitter).run(units)
        code = emitter.render()
    except CompileError as exc:
        if exc.document is None:
            exc.document = document
        raise
    return Compilation(records=records, units=units, code=code)


def compile_source(text: str, *, document: Optional[str] = None, root: str = DEFAULT_ROOT) -> str:
    """Return the generated module source for ``text``."""
    return compile_document(text, document=document, root=root).code


def discover(input_dir: Path, config: MdMetaConfig) -> List[Path]:
    """Return the Markdown documents under ``input_dir`` in a stable order."""
    found = set()
    for pattern in config.include:
        for path in input_dir.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(input_dir)
            if any(part in _EXCLUDED_DIRS for part in relative.parts[:-1]):
                continue
            if _is_excluded(relative.as_posix(), config.exclude_paths):
                continue
            found.add(path)
    return sorted(found)


def _is_excluded(relative: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        normalised = pattern.rstrip("/")
        if not normalised:
            continue
        if relative == normalised or relative.startswith(f"{normalised}/"):
            return True
        if fnmatchcase(relative, pattern):
            return True
    return False


def output_path_for(source: Path, input_dir: Path, output_dir: Path, suffix: str = ".py") -> Path:
    """Mirror ``source``'s location under ``output_dir`` with ``suffix``."""
    relative = source.relative_to(input_dir)
    return output_dir / relative.with_suffix(suffix)


def _compile_file(
    source: Path, output: Path, root: str, lazy_fields: Sequence[str]
) -> CompiledDocument:
    text = source.read_text(encoding="utf-8")
    result = compile_document(text, document=str(source), root=root, lazy_fields=lazy_fields)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.code, encoding="utf-8")
    return CompiledDocument(
        source=source,
        output=output,
        records=len(result.records),
        units=len(result.units),
    )


class Compiler:
    """Compiles a directory tree of annotated Markdown documents."""

    def __init__(self, config: MdMetaConfig | None = None) -> None:
        self._config = config
        self.logger = get_logger("compiler")

    def config_for(self, input_dir: Path) -> MdMetaConfig:
        if self._config is not None:
            return self._config
        return load_config(input_dir)

    def compile_tree(
        self, input_dir: Path, output_dir: Path, *, jobs: Optional[int] = None
    ) -> List[CompiledDocument]:
        """Compile every discovered document, writing one module per document."""
        input_dir = input_dir.expanduser().resolve()
        output_dir = output_dir.expanduser().resolve()
        config = self.config_for(input_dir)
        sources = discover(input_dir, config)
        workers = jobs or config.jobs
        self.logger.debug("Discovered %d documents under %s", len(sources), input_dir)

        tasks = [
            (source, output_path_for(source, input_dir, output_dir, config.output_suffix))
            for source in sources
        ]
        results: List[CompiledDocument] = []
        if workers > 1 and len(tasks) > 1:
            with ProcessPoolExecutor(max_workers=workers) as pool:
                futures = [
                    pool.submit(_compile_file, source, output, config.root, list(config.lazy_fields))
                    for source, output in tasks
                ]
                for index, future in enumerate(futures, start=1):
                    results.append(self._collect(future.result, tasks[index - 1][0]))
                    self._report(results[-1], index, len(tasks))
        else:
            for index, (source, output) in enumerate(tasks, start=1):
                compiled = self._collect(
                    lambda: _compile_file(source, output, config.root, list(config.lazy_fields)),
                    source,
                )
                results.append(compiled)
                self._report(compiled, index, len(tasks))
        return results

    def check_tree(self, input_dir: Path) -> List[CompiledDocument]:
        """Compile every document in memory without writing output."""
        input_dir = input_dir.expanduser().resolve()
        config = self.config_for(input_dir)
        results: List[CompiledDocument] = []
        for source in discover(input_dir, config):
            result = self._collect(
                lambda: compile_document(
                    source.read_text(encoding="utf-8"),
                    document=str(source),
                    root=config.root,
                    lazy_fields=config.lazy_fields,
                ),
                source,
            )
            results.append(
                CompiledDocument(
                    source=source,
                    output=source,
                    records=len(result.records),
                    units=len(result.units),
                )
            )
            self.logger.info("%s: %d units", source, len(result.units))
        return results

    def _collect(self, run: Callable[[], _T], source: Path) -> _T:
        try:
            return run()
        except (CompileError, OSError, UnicodeDecodeError):
            self.logger.error("Failed to compile %s", source)
            raise

    def _report(self, compiled: CompiledDocument, index: int, total: int) -> None:
        self.logger.info("[%d/%d] %s -> %s", index, total, compiled.source, compiled.output)
        self.logger.debug(
            "%s: %d records, %d units", compiled.source, compiled.records, compiled.units
        )


__all__ = [
    "Compilation",
    "CompiledDocument",
    "Compiler",
    "compile_document",
    "compile_source",
    "discover",
    "output_path_for",
]

"""Tests for mdmeta.compiler."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mdmeta.compiler import Compiler, compile_document, discover, output_path_for
from mdmeta.config import MdMetaConfig
from mdmeta.errors import StructuralError
from tests._fixtures.doc_builder import DocTreeBuilder

_MAYBE_DOC = """
@annotate: root.maybe.Just
category: Constructing
---
Constructs a Just.
"""


def test_compile_document_returns_records_units_and_code() -> None:
    result = compile_document("@annotate: root.a\n@annotate: root.b\n---\nShared.", document="a.md")
    assert len(result.records) == 1
    assert len(result.units) == 2
    assert "meta.for_(root.a)" in result.code
    assert "meta.for_(root.b)" in result.code


def test_compile_document_attaches_document_to_errors() -> None:
    with pytest.raises(StructuralError) as excinfo:
        compile_document("---\n", document="docs/broken.md")
    assert excinfo.value.document == "docs/broken.md"
    assert str(excinfo.value) == "docs/broken.md:1: separator without entity"


def test_output_path_for_mirrors_relative_location() -> None:
    source = Path("/in/maybe/core.md")
    assert output_path_for(source, Path("/in"), Path("/out")) == Path("/out/maybe/core.py")
    assert output_path_for(source, Path("/in"), Path("/out"), ".js") == Path("/out/maybe/core.js")


def test_discover_honours_includes_and_exclusions(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write(
        {
            "maybe.md": _MAYBE_DOC,
            "nested/result.md": _MAYBE_DOC,
            "drafts/wip.md": _MAYBE_DOC,
            "node_modules/pkg/readme.md": _MAYBE_DOC,
            "notes.txt": "not markdown",
        }
    )
    root = doc_tree.path()
    config = MdMetaConfig(base_dir=root, exclude_paths=["drafts/"])

    found = discover(root, config)

    assert [path.relative_to(root).as_posix() for path in found] == ["maybe.md", "nested/result.md"]


def test_compile_tree_writes_one_module_per_document(doc_tree: DocTreeBuilder, caplog) -> None:
    doc_tree.write({"maybe.md": _MAYBE_DOC, "nested/guide.md": "@guide: Intro\n---\nHello.\n"})
    caplog.set_level(logging.INFO, logger="mdmeta")

    results = Compiler().compile_tree(doc_tree.path(), doc_tree.output)

    assert [result.units for result in results] == [1, 1]
    maybe_module = doc_tree.output / "maybe.py"
    guide_module = doc_tree.output / "nested" / "guide.py"
    assert maybe_module.exists()
    assert guide_module.exists()
    assert "meta.for_(root.maybe.Just)" in maybe_module.read_text(encoding="utf-8")
    assert "ensure_guide(root, 'Intro')" in guide_module.read_text(encoding="utf-8")
    assert any("[1/2]" in message for message in caplog.messages)


def test_compile_tree_reads_project_config(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write(
        {
            ".mdmeta.yml": "root: folktale\noutput_suffix: mm.py\n",
            "maybe.md": "@annotate: folktale.maybe\n---\nMaybe.\n",
        }
    )

    Compiler().compile_tree(doc_tree.path(), doc_tree.output)

    code = (doc_tree.output / "maybe.mm.py").read_text(encoding="utf-8")
    assert "def annotate(meta, folktale):" in code


def test_compile_tree_in_parallel(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write({f"doc{index}.md": _MAYBE_DOC for index in range(3)})

    results = Compiler().compile_tree(doc_tree.path(), doc_tree.output, jobs=2)

    assert [result.source.name for result in results] == ["doc0.md", "doc1.md", "doc2.md"]
    assert all(result.output.exists() for result in results)


def test_compile_tree_fails_whole_document(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write({"broken.md": "@annotate: root.a\nx: 1\n@annotate: root.b\n"})

    with pytest.raises(StructuralError) as excinfo:
        Compiler().compile_tree(doc_tree.path(), doc_tree.output)

    assert excinfo.value.document == str(doc_tree.path().resolve() / "broken.md")
    assert excinfo.value.line == 3
    assert not (doc_tree.output / "broken.py").exists()


def test_check_tree_does_not_write(doc_tree: DocTreeBuilder) -> None:
    doc_tree.write({"maybe.md": _MAYBE_DOC})

    results = Compiler().check_tree(doc_tree.path())

    assert [result.units for result in results] == [1]
    assert not doc_tree.output.exists()

"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdmeta.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "check", "docs"])
    assert args.verbose is True
    assert args.command == "check"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["compile", "docs", "build", "--verbose"])
    assert args.verbose is True
    assert args.command == "compile"
    assert args.input == "docs"
    assert args.output == "build"


def test_cli_accepts_jobs_option() -> None:
    parser = _build_parser()
    args = parser.parse_args(["compile", "docs", "build", "-j", "3"])
    assert args.jobs == 3


def test_main_compiles_documents(tmp_path: Path, capsys) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "maybe.md").write_text("@annotate: root.maybe\n---\nMaybe.\n", encoding="utf-8")

    main(["compile", str(docs), str(tmp_path / "build")])

    assert (tmp_path / "build" / "maybe.py").exists()
    assert "Compiled 1 documents (1 metadata units)" in capsys.readouterr().out


def test_main_check_reports_failures(tmp_path: Path, capsys) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "broken.md").write_text("Intro\n@annotate: root.a\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(docs)])

    assert excinfo.value.code == 1
    assert "documentation before annotation" in capsys.readouterr().err


def test_main_rejects_missing_input(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path / "missing")])
    assert excinfo.value.code == 1


def test_cli_accepts_log_file_before_or_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--log-file", "run.log", "check", "docs"]).log_file == "run.log"
    assert parser.parse_args(["check", "docs", "--log-file", "run.log"]).log_file == "run.log"
    assert parser.parse_args(["check", "docs"]).log_file is None


def test_main_writes_debug_log_file(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "maybe.md").write_text("@annotate: root.maybe\n---\nMaybe.\n", encoding="utf-8")
    log_file = tmp_path / "logs" / "mdmeta.log"

    main(["compile", str(docs), str(tmp_path / "build"), "--log-file", str(log_file)])

    content = log_file.read_text(encoding="utf-8")
    assert "INFO mdmeta.compiler: [1/1]" in content
    assert "maybe.md" in content
    assert "DEBUG mdmeta.compiler: Discovered 1 documents" in content


@pytest.mark.parametrize("command", ["compile", "check"])
def test_main_reports_undecodable_documents(tmp_path: Path, capsys, command: str) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "bad.md").write_bytes(b"@annotate: root.a\n---\n\xff\xfe broken\n")
    argv = [command, str(docs)] + ([str(tmp_path / "build")] if command == "compile" else [])

    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert f"mdmeta {command} failed" in err
    assert "can't decode" in err
    assert "bad.md" in err

"""Tests for mdmeta.parsing.classifier."""

from __future__ import annotations

from mdmeta.models import EndOfInput, EntityDirective, GuideDirective, PlainLine, Separator
from mdmeta.parsing import classify, classify_lines, split_lines


def test_classify_recognises_directives() -> None:
    assert classify("@annotate: root.maybe.Just") == EntityDirective("root.maybe.Just")
    assert classify("@annotate:root.maybe") == EntityDirective("root.maybe")
    assert classify("@guide: Getting started") == GuideDirective("Getting started")


def test_classify_recognises_separators() -> None:
    assert classify("---") == Separator()
    assert classify("-----   ") == Separator()
    assert classify("--") == PlainLine("--")
    assert classify("--- trailing text") == PlainLine("--- trailing text")


def test_classify_degrades_incomplete_directives_to_plain_lines() -> None:
    assert classify("@annotate:") == PlainLine("@annotate:")
    assert classify("  @annotate: indented") == PlainLine("  @annotate: indented")
    assert classify("@Annotate: wrong case") == PlainLine("@Annotate: wrong case")
    assert classify("") == PlainLine("")


def test_split_lines_handles_every_line_break_convention() -> None:
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]
    assert split_lines("a\n") == ["a", ""]
    assert split_lines("") == []


def test_classify_lines_appends_end_of_input() -> None:
    kinds = list(classify_lines("@guide: Intro\n---\nHello"))
    assert kinds == [GuideDirective("Intro"), Separator(), PlainLine("Hello"), EndOfInput()]
    assert list(classify_lines("")) == [EndOfInput()]

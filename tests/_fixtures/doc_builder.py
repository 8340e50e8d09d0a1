"""Helper utilities for constructing temporary documentation trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class DocTreeBuilder:
    """Utility for writing annotated Markdown files into a throwaway directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "docs"
        self.root.mkdir()
        self.output = tmp_path / "build"

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the documentation tree."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self) -> Path:
        """Return the documentation root path."""
        return self.root


__all__ = ["DocTreeBuilder"]

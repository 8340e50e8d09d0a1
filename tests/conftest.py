from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.doc_builder import DocTreeBuilder


@pytest.fixture
def doc_tree(tmp_path: Path) -> DocTreeBuilder:
    """Provide a reusable documentation tree rooted at the pytest tmp_path."""
    return DocTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_mdmeta_logger() -> Iterator[None]:
    """Undo configure_logging so CLI tests do not leak handlers into later tests."""
    yield
    logger = logging.getLogger("mdmeta")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

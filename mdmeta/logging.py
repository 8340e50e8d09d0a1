"""Logging utilities for mdmeta commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "mdmeta"
_CONSOLE_FORMAT = "[mdmeta] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``mdmeta`` hierarchy, e.g. ``mdmeta.compiler``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send compiler progress to stderr and, optionally, a full trace to ``log_file``.

    The console shows the per-document ``[n/total]`` lines at INFO, or the
    record and unit counts as well with ``verbose``. A log file always
    receives DEBUG records so a failed run over a large tree can be inspected
    afterwards without re-running it.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False

    # Repeated CLI invocations in one process replace the previous sinks.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]

"""Emitter contract and the driver feeding metadata units to it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from ..logging import get_logger
from ..models import MetadataUnit, Target


class Emitter(ABC):
    """Backend that turns metadata units into artifacts."""

    @abstractmethod
    def emit(self, target: Target, fields: Mapping[str, Any]) -> None:
        """Record metadata ``fields`` for ``target``."""


class EmissionDriver:
    """Feeds metadata units to an emitter in document order."""

    def __init__(self, emitter: Emitter) -> None:
        self.emitter = emitter
        self.logger = get_logger("emit")

    def run(self, units: Iterable[MetadataUnit]) -> int:
        count = 0
        for unit in units:
            self.emitter.emit(unit.target, unit.fields)
            count += 1
        self.logger.debug("Emitted %d metadata units", count)
        return count


__all__ = ["EmissionDriver", "Emitter"]

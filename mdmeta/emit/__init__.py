"""Emission of metadata units."""

from .base import EmissionDriver, Emitter
from .python import PythonModuleEmitter

__all__ = ["EmissionDriver", "Emitter", "PythonModuleEmitter"]

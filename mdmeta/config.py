"""Configuration loading for mdmeta (.mdmeta.yml)."""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .analysis.metadata import DEFAULT_LAZY_FIELDS, DEFAULT_ROOT
from .emit.python import RESERVED_NAMES

CONFIG_FILENAME = ".mdmeta.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MdMetaConfig:
    """Represents the settings defined in .mdmeta.yml."""

    base_dir: Path
    root: str = DEFAULT_ROOT
    include: List[str] = field(default_factory=lambda: ["**/*.md"])
    exclude_paths: List[str] = field(default_factory=list)
    output_suffix: str = ".py"
    lazy_fields: List[str] = field(default_factory=lambda: list(DEFAULT_LAZY_FIELDS))
    jobs: int = 1


def load_config(config_path: Path) -> MdMetaConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    base_dir = config_file.parent.resolve()

    if not config_file.exists():
        return MdMetaConfig(base_dir=base_dir)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = MdMetaConfig(base_dir=base_dir)

    root = _as_str(data.get("root"))
    if root is not None:
        if not root.isidentifier():
            raise ConfigError(f"root must be a Python identifier, got {root!r}")
        if keyword.iskeyword(root) or root in RESERVED_NAMES:
            raise ConfigError(f"root cannot be the reserved name {root!r}")
        config.root = root

    include = _as_str_list(data.get("include"))
    if include:
        config.include = include
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    suffix = _as_str(data.get("output_suffix"))
    if suffix:
        config.output_suffix = suffix if suffix.startswith(".") else f".{suffix}"

    if "lazy_fields" in data:
        config.lazy_fields = _as_str_list(data.get("lazy_fields"))

    jobs = _as_int(data.get("jobs"))
    if jobs is not None:
        if jobs < 1:
            raise ConfigError("jobs must be a positive integer")
        config.jobs = jobs

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "MdMetaConfig", "load_config"]

"""Runtime helpers imported by generated metadata modules."""

from __future__ import annotations

from types import ModuleType
from typing import Any, Dict, List, Mapping, MutableMapping

META_ATTRIBUTE = "__mdmeta__"


class Guide:
    """Placeholder object that guide metadata is attached to."""

    def __init__(self, title: str) -> None:
        self.title = title

    def __repr__(self) -> str:
        return f"Guide({self.title!r})"


def _own_meta(obj: Any) -> Mapping[str, Any] | None:
    namespace = getattr(obj, "__dict__", None)
    if namespace is None:
        return None
    return namespace.get(META_ATTRIBUTE)


def get_meta(obj: Any) -> Dict[str, Any]:
    """Return a copy of the metadata visible on ``obj``, including inherited metadata."""
    return dict(getattr(obj, META_ATTRIBUTE, None) or {})


def with_meta(obj: Any, meta: Mapping[str, Any]) -> Any:
    """Merge ``meta`` into the metadata owned by ``obj`` and return ``obj``.

    Metadata inherited from a class is never modified: the object always gets
    a fresh mapping seeded only from metadata it already owns. Keys prefixed
    with ``~`` override the unprefixed field.
    """
    updated: Dict[str, Any] = dict(_own_meta(obj) or {})
    for key, value in meta.items():
        if isinstance(key, str) and key.startswith("~"):
            updated[key[1:]] = value
        else:
            updated[key] = value
    try:
        setattr(obj, META_ATTRIBUTE, updated)
    except (AttributeError, TypeError) as exc:
        raise TypeError(f"Cannot attach metadata to {type(obj).__name__} objects") from exc
    return obj


def ensure_guide(parent: Any, title: str) -> Guide:
    """Return the guide registered under ``title`` on ``parent``, creating it if absent."""
    if isinstance(parent, MutableMapping):
        guide = parent.get(title)
        if guide is None:
            guide = parent[title] = Guide(title)
        return guide
    guide = getattr(parent, title, None)
    if guide is None:
        guide = Guide(title)
        setattr(parent, title, guide)
    return guide


class MetaBinding:
    """Pending metadata update for one object."""

    def __init__(self, registry: "MetaRegistry", obj: Any) -> None:
        self._registry = registry
        self.obj = obj

    def update(self, meta: Mapping[str, Any]) -> Any:
        with_meta(self.obj, meta)
        self._registry.annotated.append(self.obj)
        return self.obj


class MetaRegistry:
    """The ``meta`` object passed to a generated module's ``annotate`` function."""

    def __init__(self) -> None:
        self.annotated: List[Any] = []

    def for_(self, obj: Any) -> MetaBinding:
        return MetaBinding(self, obj)

    def get(self, obj: Any) -> Dict[str, Any]:
        return get_meta(obj)

    def apply(self, module: ModuleType, root: Any) -> List[Any]:
        """Run ``module.annotate`` against ``root`` and return the annotated objects."""
        start = len(self.annotated)
        module.annotate(self, root)
        return self.annotated[start:]


__all__ = [
    "Guide",
    "META_ATTRIBUTE",
    "MetaBinding",
    "MetaRegistry",
    "ensure_guide",
    "get_meta",
    "with_meta",
]

"""Module loader backends and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable, Iterable

from .base import ModuleLoader, find_root_path
from .systemjs import SystemJSConfigLoader

_ENTRY_POINT_GROUP = "jspmdoc.loaders"

_BUILTIN_FACTORIES: dict[str, Callable[[Path], ModuleLoader]] = {
    "systemjs": SystemJSConfigLoader,
}


def get_loader(name: str, root: Path) -> ModuleLoader:
    """Instantiate the loader registered under ``name`` for ``root``."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is None:
        for entry in _iter_entry_points():
            if entry.name.lower() != key:
                continue
            try:
                factory = entry.load()
            except Exception as exc:  # pragma: no cover - defensive guard
                raise RuntimeError(f"Failed to load loader entry point '{name}': {exc}") from exc
            break
    if factory is None:
        raise ValueError(f"Unknown module loader requested: {name}")

    loader = factory(root)
    if not isinstance(loader, ModuleLoader):
        raise TypeError(f"Loader factory for '{name}' did not return a ModuleLoader instance")
    return loader


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "ModuleLoader",
    "SystemJSConfigLoader",
    "find_root_path",
    "get_loader",
]

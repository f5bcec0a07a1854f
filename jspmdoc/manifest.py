"""Project manifest (``package.json``) parsing for JSPM dependencies."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from .errors import ManifestError
from .logging import get_logger

logger = get_logger("manifest")

DEPENDENCY_KEYS = {
    "main": "dependencies",
    "dev": "devDependencies",
}

# ``registry:target`` locators such as ``npm:lodash@^4.0.0`` or ``github:org/repo@master``.
_EXTERNAL_SPECIFIER = re.compile(r"^[a-z][a-z0-9-]*:[^\s/.][^\s]*$", re.IGNORECASE)
_LOCAL_REGISTRIES = {"file", "link"}


def load_manifest(path: Path) -> Dict[str, Any]:
    """Return the parsed manifest or raise :class:`ManifestError`."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Could not locate 'package.json' at '{path}'") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Could not parse '{path}': {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"'{path}' must contain a JSON object")
    return data


def load_top_level_packages(
    manifest: Mapping[str, Any],
    explicit: Sequence[str] = (),
    kind: str = "main",
    *,
    silent: bool = False,
) -> Dict[str, str]:
    """Return ``{requested name: specifier}`` for top-level JSPM packages.

    ``kind`` selects ``jspm.dependencies`` (``main``) or
    ``jspm.devDependencies`` (``dev``). A non-empty ``explicit`` list
    restricts the result to those names in the given order; names missing
    from the manifest are dropped with a warning. Only externally hosted
    specifiers are kept.
    """
    if kind not in DEPENDENCY_KEYS:
        raise ValueError(f"Unknown dependency kind: {kind}")
    key = DEPENDENCY_KEYS[kind]

    namespace = manifest.get("jspm")
    declared = namespace.get(key) if isinstance(namespace, Mapping) else None
    if not isinstance(declared, Mapping):
        if not silent:
            logger.warning("no 'jspm.%s' entry found in 'package.json'", key)
        return {}

    if explicit:
        selected: Dict[str, Any] = {}
        for name in explicit:
            if name in declared:
                selected[name] = declared[name]
            elif not silent:
                logger.warning("package '%s' is not declared in 'jspm.%s'; skipping", name, key)
    else:
        selected = dict(declared)

    return {
        name: specifier
        for name, specifier in selected.items()
        if isinstance(specifier, str) and is_external_specifier(specifier)
    }


def is_external_specifier(specifier: str) -> bool:
    """True for registry or source-control locators resolvable by the loader."""
    if not _EXTERNAL_SPECIFIER.match(specifier):
        return False
    registry = specifier.split(":", 1)[0].lower()
    return registry not in _LOCAL_REGISTRIES


__all__ = ["DEPENDENCY_KEYS", "is_external_specifier", "load_manifest", "load_top_level_packages"]

"""Rewriting of the generated ESDoc search index script."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Sequence

from ..errors import ConfigError, PathError
from ..rules import RewriteRule, apply_search_index_rules

SEARCH_INDEX_PREFIX = "window.esdocSearchIndex = "

# Entries are ``[id, url, display html, kind]``; only the display field carries import paths.
_DISPLAY_FIELD = 2


def search_index_path(destination: Path) -> Path:
    return destination / "script" / "search_index.js"


def parse_search_index(text: str) -> List[Any]:
    payload = text.replace(SEARCH_INDEX_PREFIX, "", 1)
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("search index payload must be a JSON array")
    return data


def render_search_index(entries: Sequence[Any]) -> str:
    return SEARCH_INDEX_PREFIX + json.dumps(list(entries), indent=2)


def rewrite_entries(entries: List[Any], rules: Sequence[RewriteRule]) -> List[Any]:
    """Apply ``rules`` to the display field of every entry in place."""
    for entry in entries:
        if not isinstance(entry, list) or len(entry) <= _DISPLAY_FIELD:
            continue
        value = entry[_DISPLAY_FIELD]
        if isinstance(value, str):
            entry[_DISPLAY_FIELD] = apply_search_index_rules(value, rules)
    return entries


def rewrite_search_index(path: Path, rules: Sequence[RewriteRule]) -> int:
    """Rewrite the search index script at ``path``; returns the entry count."""
    if not path.exists():
        raise PathError(f"could not locate search index '{path}'")
    try:
        entries = parse_search_index(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"could not parse search index '{path}': {exc}") from exc
    rewrite_entries(entries, rules)
    path.write_text(render_search_index(entries), encoding="utf-8")
    return len(entries)


__all__ = [
    "SEARCH_INDEX_PREFIX",
    "parse_search_index",
    "render_search_index",
    "rewrite_entries",
    "rewrite_search_index",
    "search_index_path",
]

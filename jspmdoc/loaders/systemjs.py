"""Offline SystemJS loader backed by the project's ``config.js``.

JSPM 0.16 writes its loader configuration as one or more
``System.config({...})`` calls. The object literals are JavaScript rather
than JSON (unquoted keys, comments, trailing commas), so they are cleaned up
and read as YAML flow mappings, which accept unquoted keys.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import ConfigError
from .base import ModuleLoader

_CONFIG_CALL = re.compile(r"System\.config\s*\(")
_QUOTES = {'"', "'"}


class SystemJSConfigLoader(ModuleLoader):
    """Resolves package names with the ``map`` and ``paths`` of ``config.js``."""

    def __init__(self, root: Path, config: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(root)
        if config is None:
            config = load_systemjs_config(root / self.config_filename)
        self._config = config
        base_url = str(config.get("baseURL") or "").strip("/")
        self._base_path = root / base_url if base_url else root
        self._default_js_extensions = bool(config.get("defaultJSExtensions", True))
        self._map = _as_mapping(config.get("map"))
        self._paths = {
            key: value
            for key, value in _as_mapping(config.get("paths")).items()
            if isinstance(value, str)
        }

    def normalize(self, name: str) -> str:
        if name.startswith(("./", "../", "/")):
            target = name
        else:
            target = self._apply_paths(self._apply_map(name))
        path = Path(os.path.normpath(self._base_path / target))
        if self._default_js_extensions and path.suffix != ".js":
            path = path.with_name(f"{path.name}.js")
        return path.as_uri()

    def dependency_map(self) -> Dict[str, Dict[str, str]]:
        dependencies: Dict[str, Dict[str, str]] = {}
        for package, children in self._map.items():
            if not isinstance(children, dict):
                continue
            dependencies[package] = {
                str(alias): child for alias, child in children.items() if isinstance(child, str)
            }
        return dependencies

    def _apply_map(self, name: str) -> str:
        best: Optional[str] = None
        for key, value in self._map.items():
            if not isinstance(value, str):
                continue
            if name == key or name.startswith(f"{key}/"):
                if best is None or len(key) > len(best):
                    best = key
        if best is None:
            return name
        return f"{self._map[best]}{name[len(best):]}"

    def _apply_paths(self, name: str) -> str:
        if name in self._paths:
            return self._paths[name]
        best_prefix: Optional[str] = None
        result = name
        for pattern, target in self._paths.items():
            if "*" not in pattern:
                continue
            prefix, suffix = pattern.split("*", 1)
            if len(name) < len(prefix) + len(suffix):
                continue
            if not (name.startswith(prefix) and name.endswith(suffix)):
                continue
            if best_prefix is None or len(prefix) > len(best_prefix):
                best_prefix = prefix
                wildcard = name[len(prefix) : len(name) - len(suffix)]
                result = target.replace("*", wildcard, 1)
        return result


def load_systemjs_config(path: Path) -> Dict[str, Any]:
    """Read and merge every ``System.config`` call found in ``path``."""
    if not path.exists():
        raise ConfigError(f"SystemJS config not found: {path}")
    return parse_systemjs_config(path.read_text(encoding="utf-8"))


def parse_systemjs_config(text: str) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for match in _CONFIG_CALL.finditer(text):
        start = text.find("{", match.end())
        if start == -1:
            raise ConfigError("System.config call without an object literal")
        literal = _extract_object_literal(text, start)
        try:
            data = yaml.safe_load(_clean_literal(literal))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse System.config literal: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("System.config literal must be an object")
        _deep_merge(merged, data)
    return merged


def _extract_object_literal(text: str, start: int) -> str:
    depth = 0
    index = start
    quote: Optional[str] = None
    while index < len(text):
        char = text[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            index = len(text) if newline == -1 else newline
            continue
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = len(text) if end == -1 else end + 2
            continue
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
        index += 1
    raise ConfigError("Unbalanced braces in System.config literal")


def _clean_literal(literal: str) -> str:
    """Drop comments and trailing commas and replace tabs outside strings."""
    output: List[str] = []
    index = 0
    quote: Optional[str] = None
    while index < len(literal):
        char = literal[index]
        if quote:
            output.append(char)
            if char == "\\" and index + 1 < len(literal):
                output.append(literal[index + 1])
                index += 2
                continue
            if char == quote:
                quote = None
            index += 1
            continue
        if char in _QUOTES:
            quote = char
            output.append(char)
        elif literal.startswith("//", index):
            newline = literal.find("\n", index)
            index = len(literal) if newline == -1 else newline
            continue
        elif literal.startswith("/*", index):
            end = literal.find("*/", index + 2)
            index = len(literal) if end == -1 else end + 2
            continue
        elif char == ",":
            lookahead = index + 1
            while lookahead < len(literal) and literal[lookahead].isspace():
                lookahead += 1
            if lookahead < len(literal) and literal[lookahead] in "}]":
                index += 1
                continue
            output.append(char)
        elif char == "\t":
            output.append(" ")
        else:
            output.append(char)
        index += 1
    return "".join(output)


def _deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            _deep_merge(existing, value)
        else:
            target[key] = value


def _as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = ["SystemJSConfigLoader", "load_systemjs_config", "parse_systemjs_config"]

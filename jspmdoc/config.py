"""Plugin options and host configuration loading."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError

PLUGIN_NAMES = ("esdoc-plugin-jspm", "jspmdoc")

_YAML_SUFFIXES = {".yml", ".yaml"}


@dataclass
class PluginOptions:
    """Options from the plugin's ``option`` block in the ESDoc config."""

    packages: List[str] = field(default_factory=list)
    dev_packages: List[str] = field(default_factory=list)
    parse_dependencies: bool = True
    silent: bool = False
    verbose: bool = False
    loader: str = "systemjs"


def load_options(raw: Optional[Mapping[str, Any]]) -> PluginOptions:
    """Build :class:`PluginOptions` from the raw option mapping."""
    if raw is None:
        return PluginOptions()
    if not isinstance(raw, Mapping):
        raise ConfigError("plugin 'option' entry must be a mapping")

    parse_dependencies = _as_bool(raw.get("parseDependencies"))
    return PluginOptions(
        packages=_as_str_list(raw.get("packages")),
        dev_packages=_as_str_list(raw.get("devPackages")),
        parse_dependencies=True if parse_dependencies is None else parse_dependencies,
        silent=_as_bool(raw.get("silent")) or False,
        verbose=_as_bool(raw.get("verbose")) or False,
        loader=_as_str(raw.get("loader")) or "systemjs",
    )


def load_host_config(config_path: Path) -> Dict[str, Any]:
    """Load an ESDoc configuration file (JSON or YAML) from disk."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        raise ConfigError(f"ESDoc config not found: {config_file}")

    text = config_file.read_text(encoding="utf-8")
    try:
        if config_file.suffix in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {config_file.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")
    return data


def plugin_options(host_config: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Return the ``option`` block of the jspm plugin entry, if any."""
    plugins = host_config.get("plugins")
    if not isinstance(plugins, Sequence) or isinstance(plugins, str):
        return None
    for entry in plugins:
        if not isinstance(entry, Mapping):
            continue
        name = _as_str(entry.get("name")) or ""
        if any(plugin_name in name for plugin_name in PLUGIN_NAMES):
            option = entry.get("option")
            return option if isinstance(option, Mapping) else None
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        for name in (".esdocrc", "esdoc.json", "esdoc.yml"):
            candidate = config_path / name
            if candidate.exists():
                return candidate.resolve()
        return (config_path / "esdoc.json").resolve()
    return config_path.resolve()


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "PLUGIN_NAMES",
    "PluginOptions",
    "load_host_config",
    "load_options",
    "plugin_options",
]

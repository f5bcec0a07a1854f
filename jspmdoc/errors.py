"""Exceptions raised while linking JSPM packages into generated docs."""

from __future__ import annotations


class PluginError(RuntimeError):
    """Base class for errors that abort a documentation run."""


class ConfigError(PluginError):
    """Raised when a configuration file or option block is invalid."""


class PathError(PluginError):
    """Raised when a computed or configured path does not exist on disk."""


class ManifestError(PluginError):
    """Raised when the project manifest is missing or cannot be parsed."""


class RootPathError(PluginError):
    """Raised when the project root holding the loader config cannot be found."""


__all__ = ["ConfigError", "ManifestError", "PathError", "PluginError", "RootPathError"]

"""Sidecar ``.gitignore`` emitted into the documentation destination."""

from __future__ import annotations

from pathlib import Path

# Keeps generated ESDoc intermediates out of version control and re-includes
# ``jspm_packages`` output that a parent .gitignore would otherwise hide.
GITIGNORE_ENTRIES = ("!jspm_packages", "ast", "coverage.json", "dump.json", "package.json")


def write_gitignore(destination: Path) -> Path:
    """Write (overwriting) ``<destination>/.gitignore``."""
    destination.mkdir(parents=True, exist_ok=True)
    path = destination / ".gitignore"
    path.write_text("\n".join(GITIGNORE_ENTRIES), encoding="utf-8")
    return path


__all__ = ["GITIGNORE_ENTRIES", "write_gitignore"]

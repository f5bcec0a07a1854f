"""Base classes for module loader backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..errors import RootPathError
from ..utils import PACKAGES_DIR


class ModuleLoader(ABC):
    """Contract for loaders that map package names onto ``jspm_packages``."""

    #: File at the project root that identifies a loader-managed project.
    config_filename: str = "config.js"
    #: Directory under the project root holding managed packages.
    packages_dir: str = PACKAGES_DIR

    def __init__(self, root: Path) -> None:
        self.root = root

    @abstractmethod
    def normalize(self, name: str) -> str:
        """Return the module URL the loader resolves ``name`` to."""

    @abstractmethod
    def dependency_map(self) -> Dict[str, Dict[str, str]]:
        """Return ``{package identity: {alias: child identity}}``."""


def find_root_path(
    override: Optional[str] = None,
    *,
    marker: str = ModuleLoader.config_filename,
    start: Optional[Path] = None,
) -> Path:
    """Locate the project root holding the loader config file.

    An explicit ``override`` must point at a directory containing ``marker``.
    Otherwise the search walks up from ``start`` (the working directory by
    default) and returns the first directory that contains ``marker``.
    """
    if override:
        root = Path(override).expanduser().resolve()
        if not root.is_dir():
            raise RootPathError(f"jspmRootPath '{override}' is not a directory")
        if not (root / marker).is_file():
            raise RootPathError(f"could not locate JSPM / SystemJS '{marker}' in '{root}'")
        return root

    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if (candidate / marker).is_file():
            return candidate
    raise RootPathError(f"could not locate root package path above '{origin}'")


__all__ = ["ModuleLoader", "find_root_path"]

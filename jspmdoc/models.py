"""Core data models shared across jspmdoc components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PackageRecord:
    """A JSPM package linked into the documentation run."""

    package_name: str
    actual_package_name: str
    full_package: str
    version: Optional[str]
    is_alias: bool
    is_dependency: bool
    full_path: str
    relative_path: str
    normalized_path: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageName": self.package_name,
            "actualPackageName": self.actual_package_name,
            "fullPackage": self.full_package,
            "version": self.version,
            "isAlias": self.is_alias,
            "isDependency": self.is_dependency,
            "fullPath": self.full_path,
            "relativePath": self.relative_path,
            "normalizedPath": self.normalized_path,
            "source": self.source,
        }


__all__ = ["PackageRecord"]

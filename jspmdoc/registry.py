"""First-wins bookkeeping of linked package records."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .logging import get_logger
from .models import PackageRecord

logger = get_logger("registry")


class PackageRegistry:
    """Collects records for one run, rejecting inconsistent duplicates.

    A record is rejected (with a warning) when its ``package_name`` was
    already linked to a different ``relative_path``, or when a different
    name already claimed its ``relative_path``. Re-adding an identical link
    is a silent no-op.
    """

    def __init__(self, *, silent: bool = False) -> None:
        self.silent = silent
        self._records: List[PackageRecord] = []
        self._by_name: Dict[str, PackageRecord] = {}
        self._by_path: Dict[str, PackageRecord] = {}

    def add(self, record: PackageRecord) -> bool:
        """Store ``record`` unless it duplicates an earlier link."""
        existing = self._by_name.get(record.package_name)
        if existing is not None:
            if existing.relative_path != record.relative_path:
                self._warn(
                    "Duplicate package '%s' linked to a different relative path '%s'.",
                    record.package_name,
                    record.relative_path,
                )
            return False

        owner = self._by_path.get(record.relative_path)
        if owner is not None:
            self._warn(
                "Duplicate path '%s' for package '%s' already linked as '%s'.",
                record.relative_path,
                record.package_name,
                owner.package_name,
            )
            return False

        self._records.append(record)
        self._by_name[record.package_name] = record
        self._by_path[record.relative_path] = record
        return True

    @property
    def records(self) -> Tuple[PackageRecord, ...]:
        return tuple(self._records)

    def _warn(self, message: str, *args: object) -> None:
        if not self.silent:
            logger.warning(message, *args)


__all__ = ["PackageRegistry"]

"""Shared helpers for package identifiers and paths."""

from __future__ import annotations

import re
from pathlib import Path, PurePath

PACKAGES_DIR = "jspm_packages"

# Semver operators first so that ">=" is replaced as a single token.
_UNSAFE_ID_PATTERN = re.compile(r"(>=|<=|\.|/|:|@|\^|>|<|~|\*)")


def sanitize_package_id(value: str) -> str:
    """Replace semver and path punctuation with ``-``."""
    return _UNSAFE_ID_PATTERN.sub("-", value)


def parse_relative_path(path: str) -> str:
    """Convert ``jspm_packages/github/org/pkg@1.0`` into ``github:org/pkg@1.0``."""
    package_path = path.replace(f"{PACKAGES_DIR}/", "", 1)
    return package_path.replace("/", ":", 1)


def strip_local_prefix(value: str) -> str:
    """Remove a leading ``./`` from a configured source directory."""
    while value.startswith("./"):
        value = value[2:]
    return value


def to_posix(path: PurePath | str) -> str:
    """Return ``path`` with forward slashes regardless of platform."""
    return PurePath(path).as_posix()


def relative_posix(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with forward slashes."""
    return to_posix(path.relative_to(root))


def split_package_segment(segment: str) -> tuple[str, str | None]:
    """Split ``name@version`` into its name and version parts."""
    if "@" not in segment[1:]:
        return segment, None
    index = segment.index("@", 1)
    return segment[:index], segment[index + 1 :]


__all__ = [
    "PACKAGES_DIR",
    "parse_relative_path",
    "relative_posix",
    "sanitize_package_id",
    "split_package_segment",
    "strip_local_prefix",
    "to_posix",
]

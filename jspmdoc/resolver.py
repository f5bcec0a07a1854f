"""Resolution of JSPM package names into linked package records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Sequence, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from .errors import ConfigError, PathError
from .loaders.base import ModuleLoader
from .logging import get_logger
from .models import PackageRecord
from .utils import (
    parse_relative_path,
    relative_posix,
    split_package_segment,
    strip_local_prefix,
    to_posix,
)

logger = get_logger("resolver")

#: ESDoc config file names probed at a package root, first match wins.
DOC_CONFIG_NAMES = (".esdocrc", "esdoc.json")


@dataclass(frozen=True)
class DocConfigFound:
    filename: str
    data: Dict[str, Any]


@dataclass(frozen=True)
class DocConfigMissing:
    filename: str


@dataclass(frozen=True)
class DocConfigMalformed:
    filename: str
    reason: str


DocConfigOutcome = Union[DocConfigFound, DocConfigMissing, DocConfigMalformed]


def probe_doc_config(path: Path) -> DocConfigOutcome:
    """Load a single doc-config candidate and report what was found."""
    if not path.is_file():
        return DocConfigMissing(path.name)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        return DocConfigMalformed(path.name, str(exc))
    if not isinstance(data, dict):
        return DocConfigMalformed(path.name, "expected a JSON object")
    return DocConfigFound(path.name, data)


def find_doc_config(
    package_root: Path, names: Sequence[str] = DOC_CONFIG_NAMES
) -> List[DocConfigOutcome]:
    """Probe ``names`` in order, stopping at the first loadable config."""
    outcomes: List[DocConfigOutcome] = []
    for name in names:
        outcome = probe_doc_config(package_root / name)
        outcomes.append(outcome)
        if isinstance(outcome, DocConfigFound):
            break
    return outcomes


class PackageResolver:
    """Turns package names into :class:`PackageRecord` instances.

    Resolution only reads the filesystem; calling :meth:`resolve` twice for the
    same name with an unchanged loader returns equal records.
    """

    def __init__(
        self,
        loader: ModuleLoader,
        root: Path,
        *,
        silent: bool = False,
        verbose: bool = False,
        doc_config_names: Sequence[str] = DOC_CONFIG_NAMES,
    ) -> None:
        self.loader = loader
        self.root = root
        self.silent = silent
        self.verbose = verbose
        self.doc_config_names = tuple(doc_config_names)

    def resolve(self, package_name: str) -> Optional[PackageRecord]:
        """Return the linked record for ``package_name`` or None when skipped.

        Raises :class:`ConfigError` when the package's doc config has no
        ``source`` entry and :class:`PathError` when the declared source
        directory does not exist.
        """
        located = self._locate(package_name)
        if located is None:
            return None
        package_path, relative_path = located

        full_package = parse_relative_path(relative_path)
        actual_package_name, version = _package_identity(relative_path)
        is_dependency = ":" in package_name
        linked_name = actual_package_name if is_dependency else package_name

        doc_config = self._load_doc_config(package_path, package_name)
        if doc_config is None:
            return None

        source = doc_config.data.get("source")
        if not isinstance(source, str):
            raise ConfigError(
                f"'{doc_config.filename}' does not have a valid 'source' entry "
                f"for JSPM package '{package_name}'"
            )

        source_root = strip_local_prefix(source).rstrip("/")
        full_path = package_path / source_root
        if not full_path.exists():
            raise PathError(f"full path generated '{to_posix(full_path)}' does not exist")

        record = PackageRecord(
            package_name=linked_name,
            actual_package_name=actual_package_name,
            full_package=full_package,
            version=version,
            is_alias=linked_name != actual_package_name,
            is_dependency=is_dependency,
            full_path=to_posix(full_path),
            relative_path=f"{relative_path}/{source_root}",
            normalized_path=f"{linked_name}/{source_root}",
            source=source,
        )

        if not self.silent:
            logger.info(
                "linked %s%sJSPM package '%s' to: %s",
                "aliased " if record.is_alias else "",
                "dependent " if record.is_dependency else "",
                record.package_name,
                record.relative_path,
            )
        return record

    def identify(self, package_name: str) -> Optional[str]:
        """Return the ``registry:name@version`` identity of a JSPM managed package.

        Unlike :meth:`resolve` this does not require a doc config, so packages
        without documentation still take part in the dependency walk.
        """
        located = self._locate(package_name)
        if located is None:
            return None
        return parse_relative_path(located[1])

    def _locate(self, package_name: str) -> Optional[tuple[Path, str]]:
        package_path = _url_to_path(self.loader.normalize(package_name))

        if self.loader.packages_dir not in package_path.parts:
            if not self.silent:
                logger.info(
                    "skipping '%s' as it does not appear to be a JSPM package.", package_name
                )
            return None

        if package_path.suffix == ".js":
            package_path = package_path.with_suffix("")

        try:
            relative_path = relative_posix(package_path, self.root)
        except ValueError:
            if not self.silent:
                logger.warning(
                    "skipping '%s' as '%s' is outside the root path.", package_name, package_path
                )
            return None
        return package_path, relative_path

    def _load_doc_config(self, package_path: Path, package_name: str) -> Optional[DocConfigFound]:
        for outcome in find_doc_config(package_path, self.doc_config_names):
            if isinstance(outcome, DocConfigFound):
                return outcome
            if isinstance(outcome, DocConfigMalformed) and not self.silent:
                logger.warning(
                    "ignoring malformed '%s' for JSPM package '%s': %s",
                    outcome.filename,
                    package_name,
                    outcome.reason,
                )
        if self.verbose:
            logger.debug("skipping '%s' as it has no ESDoc config file.", package_name)
        return None


def _url_to_path(url: str) -> Path:
    parsed = urlparse(url)
    if parsed.scheme and parsed.scheme != "file":
        return Path(url)
    return Path(url2pathname(parsed.path))


def _package_identity(relative_path: str) -> tuple[str, Optional[str]]:
    """Return the bare package name and version from a package path."""
    parts = PurePosixPath(relative_path).parts
    name, version = split_package_segment(parts[-1])
    if len(parts) >= 2 and parts[-2].startswith("@"):
        name = f"{parts[-2]}/{name}"
    return name, version


__all__ = [
    "DOC_CONFIG_NAMES",
    "DocConfigFound",
    "DocConfigMalformed",
    "DocConfigMissing",
    "DocConfigOutcome",
    "PackageResolver",
    "find_doc_config",
    "probe_doc_config",
]

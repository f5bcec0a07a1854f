"""Run preparation: manifest → resolution → dependency walk → rule tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from .config import PluginOptions
from .errors import ConfigError, PathError
from .graph import PackageGraph, build_package_graph, expand
from .loaders import ModuleLoader, find_root_path, get_loader
from .logging import get_logger
from .manifest import load_manifest, load_top_level_packages
from .models import PackageRecord
from .postproc import rewrite_search_index, search_index_path, write_gitignore
from .registry import PackageRegistry
from .resolver import PackageResolver
from .rules import RewriteRules, RootContext, build_rules, include_paths
from .utils import strip_local_prefix

SCOPES = ("main", "dev")

LoaderFactory = Callable[[str, Path], ModuleLoader]


@dataclass(frozen=True)
class PluginContext:
    """Everything computed for one documentation run.

    Built once while ESDoc prepares its config and read by every later hook.
    Tools that need the linked package data receive this object explicitly.
    """

    root_path: Path
    root: RootContext
    destination: Optional[Path]
    options: PluginOptions
    records: Tuple[PackageRecord, ...]
    main_records: Tuple[PackageRecord, ...]
    dev_records: Tuple[PackageRecord, ...]
    includes: Tuple[str, ...]
    rules: RewriteRules
    graphs: Mapping[str, PackageGraph] = field(default_factory=dict)

    @property
    def root_package_name(self) -> str:
        return self.root.root_package_name

    @property
    def root_dir(self) -> str:
        return self.root.root_dir

    @property
    def local_src_root(self) -> str:
        return self.root.local_src_root

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rootPath": str(self.root_path),
            "rootDir": self.root_dir,
            "rootPackageName": self.root_package_name,
            "localSrcRoot": self.local_src_root,
            "includes": list(self.includes),
            "packages": [record.to_dict() for record in self.records],
        }


def rewrite_host_config(config: Mapping[str, Any], context: PluginContext) -> Dict[str, Any]:
    """Return ``config`` with a ``.`` source root and the linked includes."""
    updated = dict(config)
    updated["source"] = "."
    updated["includes"] = list(context.includes)
    return updated


class Orchestrator:
    """Coordinates package linking for a documentation run."""

    def __init__(self, loader_factory: LoaderFactory = get_loader) -> None:
        self.loader_factory = loader_factory
        self.logger = get_logger("orchestrator")

    def prepare(
        self,
        config: Mapping[str, Any],
        options: PluginOptions,
        *,
        cwd: Optional[Path] = None,
    ) -> PluginContext:
        """Resolve linked packages and build the rule tables for ``config``."""
        silent = options.silent
        root_path = find_root_path(_as_optional_str(config.get("jspmRootPath")), start=cwd)

        manifest_path = Path(_as_optional_str(config.get("package")) or "package.json")
        if not manifest_path.is_absolute():
            manifest_path = root_path / manifest_path
        manifest = load_manifest(manifest_path)

        # ESDoc names the project after the root directory when package.json has no name.
        root_dir = root_path.name
        root_package_name = _as_optional_str(manifest.get("name")) or root_dir

        local_src_root = self._local_source_root(config, root_path)
        destination = _as_optional_str(config.get("destination"))
        destination_path = None
        if destination:
            destination_path = Path(destination)
            if not destination_path.is_absolute():
                destination_path = root_path / destination_path

        if not silent:
            self.logger.info("operating in root path: '%s'", root_path)
            self.logger.info("linked local source root: '%s'", local_src_root)

        loader = self.loader_factory(options.loader, root_path)
        resolver = PackageResolver(loader, root_path, silent=silent, verbose=options.verbose)

        everything = PackageRegistry(silent=silent)
        registries = {scope: PackageRegistry(silent=silent) for scope in SCOPES}
        top_level: Dict[str, Dict[str, str]] = {scope: {} for scope in SCOPES}
        explicit_lists = {"main": options.packages, "dev": options.dev_packages}

        for scope in SCOPES:
            explicit = explicit_lists[scope]
            requested = load_top_level_packages(manifest, explicit, scope, silent=silent)
            for name in requested:
                identity = resolver.identify(name)
                if identity is None:
                    continue
                # Packages without a doc config still seed the walk and the graph.
                top_level[scope][name] = identity
                record = self._resolve(resolver, name, strict=bool(explicit), silent=silent)
                if record is not None and registries[scope].add(record):
                    everything.add(record)

        if not any(top_level.values()) and not silent:
            self.logger.warning("no JSPM packages specified or found in 'package.json'.")

        dependency_map: Mapping[str, Mapping[str, str]] = {}
        if options.parse_dependencies:
            dependency_map = loader.dependency_map()
            for scope in SCOPES:
                children = expand(top_level[scope].values(), dependency_map)
                for child in children:
                    record = self._resolve(resolver, child, strict=False, silent=silent)
                    if record is None:
                        continue
                    if registries[scope].add(record):
                        everything.add(record)

        records = everything.records
        root = RootContext(root_package_name, root_dir, local_src_root)
        graphs = self._build_graphs(
            root_package_name, top_level, dependency_map, records, verbose=options.verbose
        )

        return PluginContext(
            root_path=root_path,
            root=root,
            destination=destination_path,
            options=options,
            records=records,
            main_records=registries["main"].records,
            dev_records=registries["dev"].records,
            includes=tuple(include_paths(local_src_root, records)),
            rules=build_rules(records, root),
            graphs=graphs,
        )

    def finalize(self, context: PluginContext) -> None:
        """Rewrite the search index and emit the sidecar ``.gitignore``."""
        if context.destination is None:
            raise ConfigError("ESDoc config has no 'destination' entry")
        count = rewrite_search_index(
            search_index_path(context.destination), context.rules.search_index
        )
        self.logger.debug("rewrote %d search index entries", count)
        write_gitignore(context.destination)

    def _local_source_root(self, config: Mapping[str, Any], root_path: Path) -> str:
        source = config.get("source")
        if not isinstance(source, str) or not source:
            raise ConfigError("ESDoc config has no valid 'source' entry")
        local_full_path = root_path / source
        if not local_full_path.exists():
            self.logger.error("could not locate local source path: '%s'", local_full_path)
            raise PathError(f"could not locate local source path: '{local_full_path}'")
        return strip_local_prefix(source).rstrip("/")

    def _resolve(
        self, resolver: PackageResolver, name: str, *, strict: bool, silent: bool
    ) -> Optional[PackageRecord]:
        try:
            return resolver.resolve(name)
        except (ConfigError, PathError) as exc:
            if strict:
                self.logger.error("%s", exc)
                raise
            if not silent:
                self.logger.warning("%s; skipping JSPM package '%s'", exc, name)
            return None

    @staticmethod
    def _build_graphs(
        root_package_name: str,
        top_level: Mapping[str, Mapping[str, str]],
        dependency_map: Mapping[str, Mapping[str, str]],
        records: Sequence[PackageRecord],
        *,
        verbose: bool,
    ) -> Dict[str, PackageGraph]:
        by_identity: Dict[str, PackageRecord] = {}
        for record in records:
            by_identity.setdefault(record.full_package, record)

        combined = dict(top_level["main"])
        for name, full_package in top_level["dev"].items():
            combined.setdefault(name, full_package)
        scoped: Dict[str, Mapping[str, str]] = {"all": combined}
        scoped.update(top_level)
        return {
            scope: build_package_graph(
                root_package_name,
                names,
                dependency_map,
                scope=scope,
                records=by_identity,
                verbose=verbose,
            )
            for scope, names in scoped.items()
        }


def _as_optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


__all__ = ["Orchestrator", "PluginContext", "SCOPES", "rewrite_host_config"]

"""Dependency graph traversal over the loader's package map."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .logging import get_logger
from .models import PackageRecord
from .utils import sanitize_package_id

logger = get_logger("graph")

DependencyMap = Mapping[str, Mapping[str, str]]


def expand(top_level: Iterable[str], dependency_map: DependencyMap) -> List[str]:
    """Return every package identity reachable from ``top_level``.

    The traversal is breadth-first and each identity is reported once in
    discovery order. The top-level identities themselves are never included,
    and cycles stop expanding once all of their members have been seen.
    """
    frontier = list(dict.fromkeys(top_level))
    seen: Set[str] = set(frontier)
    discovered: List[str] = []

    while frontier:
        next_frontier: List[str] = []
        for package in frontier:
            for child in (dependency_map.get(package) or {}).values():
                if child in seen:
                    continue
                seen.add(child)
                discovered.append(child)
                next_frontier.append(child)
        frontier = next_frontier

    return discovered


@dataclass
class GraphNode:
    """A package in the dependency graph of one scope."""

    id: str
    full_package: str
    min_level: int
    scope: str
    index: int
    alias: Optional[str] = None
    record: Optional[PackageRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullPackage": self.full_package,
            "minLevel": self.min_level,
            "packageScope": self.scope,
            "index": self.index,
            "alias": self.alias,
            "packageData": self.record.to_dict() if self.record else None,
        }


@dataclass(frozen=True)
class GraphLink:
    source: int
    target: int
    min_level: int

    def to_dict(self) -> Dict[str, int]:
        return {"source": self.source, "target": self.target, "minLevel": self.min_level}


@dataclass
class PackageGraph:
    """Nodes and links reachable from the root project for one scope."""

    scope: str
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)

    @property
    def max_level(self) -> int:
        levels = [node.min_level for node in self.nodes]
        levels.extend(link.min_level for link in self.links)
        return max(levels, default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "maxLevel": self.max_level,
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


def build_package_graph(
    root_package_name: Optional[str],
    top_level: Mapping[str, str],
    dependency_map: DependencyMap,
    *,
    scope: str = "all",
    records: Mapping[str, PackageRecord] | None = None,
    verbose: bool = False,
) -> PackageGraph:
    """Build the package graph for visualisation consumers.

    ``top_level`` maps requested names to package identities. ``records``
    maps package identities to linked records. Level 0 is the root project
    (when named); top-level packages sit at the next level.
    """
    records = records or {}
    graph = PackageGraph(scope=scope)
    nodes_by_id: Dict[str, GraphNode] = {}
    depth = 0

    if root_package_name:
        root_id = f"root-{root_package_name}-master"
        root_node = GraphNode(root_id, root_package_name, depth, scope, 0)
        graph.nodes.append(root_node)
        nodes_by_id[root_id] = root_node
        depth += 1

    frontier: deque[GraphNode] = deque()
    for name, full_package in top_level.items():
        node_id = sanitize_package_id(full_package)
        if node_id in nodes_by_id:
            continue
        node = _new_node(graph, node_id, full_package, depth, scope, name, records)
        nodes_by_id[node_id] = node
        frontier.append(node)
        if root_package_name:
            graph.links.append(GraphLink(0, node.index, depth))
        if verbose:
            logger.debug("graph (%s): adding top level node '%s'", scope, node_id)

    while frontier:
        depth += 1
        next_frontier: deque[GraphNode] = deque()
        for parent in frontier:
            children = dependency_map.get(parent.full_package) or {}
            for alias, full_package in children.items():
                node_id = sanitize_package_id(full_package)
                existing = nodes_by_id.get(node_id)
                if existing is None:
                    node = _new_node(graph, node_id, full_package, depth, scope, alias, records)
                    nodes_by_id[node_id] = node
                    next_frontier.append(node)
                    graph.links.append(GraphLink(parent.index, node.index, depth))
                    if verbose:
                        logger.debug("graph (%s): depth %d adding node '%s'", scope, depth, node_id)
                    continue
                if depth < existing.min_level:
                    existing.min_level = depth
                graph.links.append(GraphLink(parent.index, existing.index, depth))
        frontier = next_frontier

    return graph


def _new_node(
    graph: PackageGraph,
    node_id: str,
    full_package: str,
    depth: int,
    scope: str,
    requested_name: str,
    records: Mapping[str, PackageRecord],
) -> GraphNode:
    record = records.get(full_package)
    actual_name = record.actual_package_name if record else None
    alias = requested_name if actual_name and requested_name != actual_name else None
    node = GraphNode(node_id, full_package, depth, scope, len(graph.nodes), alias, record)
    graph.nodes.append(node)
    return node


__all__ = ["GraphLink", "GraphNode", "PackageGraph", "build_package_graph", "expand"]

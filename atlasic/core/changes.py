"""Change-impact detection over a generated dependency graph.

Given the files touched by a change, classifies graph nodes into three
rings: the changed files themselves, files that import them, and files the
changed set imports.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

from atlasic.models.graph import CodebaseGraph, GraphNode

LEVEL_CHANGED = 0
LEVEL_DEPENDENT = 1
LEVEL_DEPENDENCY = 2

_REASONS = {
    LEVEL_CHANGED: "Directly modified",
    LEVEL_DEPENDENT: "Depends on modified file",
    LEVEL_DEPENDENCY: "Is depended on by modified file",
}


@dataclass
class ChangedNode:
    """A node affected by a change, with its distance from the change."""

    node: GraphNode
    reason: str
    level: int


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def _path_matches(node_path: str, changed_path: str) -> bool:
    """Match on a path suffix, or on the basename for bare file names."""
    if node_path.endswith(changed_path):
        return True
    return changed_path.endswith(posixpath.basename(node_path))


def detect_changed_nodes(graph: CodebaseGraph, changed_paths: list[str]) -> list[ChangedNode]:
    """Return every node affected by *changed_paths*, each at its lowest level.

    Args:
        graph: A generated dependency graph.
        changed_paths: Absolute or repo-relative paths of modified files.

    Returns:
        Affected nodes ordered by level, then by graph order.
    """
    wanted = [_normalize(p) for p in changed_paths if p]
    levels: dict[str, int] = {}

    for node in graph.nodes:
        node_path = _normalize(node.id)
        if any(_path_matches(node_path, p) for p in wanted):
            levels[node.id] = LEVEL_CHANGED

    changed = {node_id for node_id, level in levels.items() if level == LEVEL_CHANGED}

    dependents = set()
    for link in graph.links:
        if link.target in changed and link.source not in levels:
            dependents.add(link.source)
    for node_id in dependents:
        levels[node_id] = LEVEL_DEPENDENT

    upstream = changed | dependents
    for link in graph.links:
        if link.source in upstream and link.target not in levels:
            levels[link.target] = LEVEL_DEPENDENCY

    affected = [
        ChangedNode(node=node, reason=_REASONS[levels[node.id]], level=levels[node.id])
        for node in graph.nodes
        if node.id in levels
    ]
    affected.sort(key=lambda c: c.level)
    return affected

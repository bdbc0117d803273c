"""Graph data models for file nodes, dependency links, and the whole graph.

These Pydantic v2 models define the JSON schema written to the graph
cache and returned by the API.  Layout state (positions, velocities,
pins) is deliberately absent; see :mod:`atlasic.layout.arena`.
"""

from __future__ import annotations

import enum
import time
from typing import Optional

from pydantic import BaseModel, Field


class NodeCategory(str, enum.Enum):
    """Coarse role of a source file, used for colouring."""

    COMPONENT = "component"
    UTILITY = "utility"
    API = "api"
    TEST = "test"
    CONFIG = "config"
    MODEL = "model"
    OTHER = "other"


class LinkType(str, enum.Enum):
    """Enumeration of supported link types."""

    DEPENDENCY = "dependency"


def _now_ms() -> int:
    return int(time.time() * 1000)


class GraphNode(BaseModel):
    """A single source file in the dependency graph.

    Attributes:
        id: Absolute file path; unique within a graph.
        label: File basename.
        category: Role assigned by :mod:`atlasic.core.categories`.
        language: File extension without the leading dot.
    """

    id: str = Field(..., description="Absolute file path (unique key).")
    label: str = Field(..., description="File basename.")
    category: NodeCategory = Field(NodeCategory.OTHER, description="File role.")
    language: str = Field("", description="Extension without the dot.")


class GraphLink(BaseModel):
    """A directed dependency from an importing file to an imported file.

    One link is recorded per import statement, so parallel links between
    the same pair are expected.

    Attributes:
        source: ``id`` of the importing node.
        target: ``id`` of the imported node.
        type: Relationship type.
    """

    source: str = Field(..., description="Importing node id.")
    target: str = Field(..., description="Imported node id.")
    type: LinkType = Field(LinkType.DEPENDENCY, description="Relationship type.")


class CodebaseGraph(BaseModel):
    """Complete dependency graph produced by :class:`GraphBuilder`.

    Attributes:
        nodes: File nodes in discovery order.
        links: Dependency links in extraction order.
        timestamp: Creation instant in milliseconds since the epoch.
    """

    nodes: list[GraphNode] = Field(default_factory=list, description="File nodes.")
    links: list[GraphLink] = Field(default_factory=list, description="Dependency links.")
    timestamp: int = Field(default_factory=_now_ms, description="Creation time (ms).")

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class HeatMap(BaseModel):
    """Externally supplied per-file heat scores (e.g. git touch counts).

    Attributes:
        scores: Absolute path to score.
        max_score: Largest score in ``scores`` (0 when empty).
        head: Commit the scores were computed at, if known.
        window_days: History window the scores cover.
    """

    scores: dict[str, float] = Field(default_factory=dict)
    max_score: float = 0.0
    head: Optional[str] = None
    window_days: Optional[int] = None

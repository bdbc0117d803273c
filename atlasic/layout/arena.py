"""Resolution pass from the persisted graph to the layout arena.

:class:`CodebaseGraph` links refer to nodes by path string.  The layout
code needs positions, so :func:`resolve_graph` builds a
:class:`LayoutGraph` in which nodes live in a list and every edge is a
pair of integer indices into it.  A link naming an unknown node is
rejected here, once, instead of being checked on every tick.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Optional

import structlog

from atlasic.models.graph import CodebaseGraph, GraphNode

logger = structlog.get_logger(__name__)

INITIAL_SPREAD = 400.0


class DanglingLinkError(ValueError):
    """A link references a node id that is not in the graph."""

    def __init__(self, source: str, target: str, missing: str) -> None:
        super().__init__(f"Link {source} -> {target} references unknown node {missing}")
        self.source = source
        self.target = target
        self.missing = missing


@dataclass(eq=False)
class LayoutNode:
    """Mutable per-node layout state.

    ``fx``/``fy`` pin the node: while set, integration snaps the node to
    them and zeroes its velocity.
    """

    index: int
    id: str
    label: str
    category: str
    language: str
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None
    in_degree: int = 0
    heat: float = 0.0

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


@dataclass(frozen=True)
class Edge:
    """A dependency edge as indices into :attr:`LayoutGraph.nodes`."""

    source: int
    target: int


@dataclass
class LayoutGraph:
    """Index-addressed nodes and edges ready for simulation and rendering."""

    nodes: list[LayoutNode] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    index_of: dict[str, int] = field(default_factory=dict)
    dropped_links: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_id: str) -> Optional[LayoutNode]:
        index = self.index_of.get(node_id)
        return None if index is None else self.nodes[index]

    def incident_edges(self, index: int) -> set[int]:
        """Indices of all edges touching node *index*."""
        return {
            i for i, edge in enumerate(self.edges) if edge.source == index or edge.target == index
        }

    @property
    def max_in_degree(self) -> int:
        return max([1, *(n.in_degree for n in self.nodes)])


def _layout_node(index: int, node: GraphNode) -> LayoutNode:
    return LayoutNode(
        index=index,
        id=node.id,
        label=node.label,
        category=node.category.value,
        language=node.language,
    )


def resolve_graph(
    graph: CodebaseGraph,
    *,
    strict: bool = True,
    width: float = 800.0,
    height: float = 600.0,
    rng: random.Random | None = None,
) -> LayoutGraph:
    """Build a :class:`LayoutGraph` from *graph*.

    Nodes are scattered around the viewport centre, the scatter widening
    with the square root of the node count so big graphs do not start as
    one dense blob.

    Args:
        graph: The persisted graph.
        strict: Raise :class:`DanglingLinkError` on a link to an unknown
            node.  With ``strict=False`` such links are dropped and counted
            in :attr:`LayoutGraph.dropped_links`.
        width: Viewport width used for the initial scatter.
        height: Viewport height used for the initial scatter.
        rng: Random source, for reproducible layouts.

    Returns:
        The resolved arena.

    Raises:
        DanglingLinkError: In strict mode, on the first invalid link.
    """
    rng = rng or random.Random()
    layout = LayoutGraph()

    for node in graph.nodes:
        if node.id in layout.index_of:
            continue
        index = len(layout.nodes)
        layout.index_of[node.id] = index
        layout.nodes.append(_layout_node(index, node))

    spread = INITIAL_SPREAD * max(1.0, math.sqrt(len(layout.nodes) / 100))
    for lnode in layout.nodes:
        lnode.x = width / 2 + (rng.random() - 0.5) * spread
        lnode.y = height / 2 + (rng.random() - 0.5) * spread

    for link in graph.links:
        source = layout.index_of.get(link.source)
        target = layout.index_of.get(link.target)
        if source is None or target is None:
            missing = link.source if source is None else link.target
            if strict:
                raise DanglingLinkError(link.source, link.target, missing)
            layout.dropped_links += 1
            continue
        layout.edges.append(Edge(source, target))
        layout.nodes[target].in_degree += 1

    if layout.dropped_links:
        logger.warning("dangling_links_dropped", count=layout.dropped_links)
    return layout

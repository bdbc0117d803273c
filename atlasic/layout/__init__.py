"""Layout engine: arena resolution, spatial indexing and force simulation."""

from atlasic.layout.arena import DanglingLinkError, Edge, LayoutGraph, LayoutNode, resolve_graph
from atlasic.layout.barnes_hut import BarnesHutTree
from atlasic.layout.quadtree import Quadtree, Rect
from atlasic.layout.simulation import ForceSimulation, SimulationParams, SizeTier

__all__ = [
    "DanglingLinkError",
    "Edge",
    "LayoutGraph",
    "LayoutNode",
    "resolve_graph",
    "BarnesHutTree",
    "Quadtree",
    "Rect",
    "ForceSimulation",
    "SimulationParams",
    "SizeTier",
]

"""Pydantic v2 data models for the Atlasic dependency graph."""

from atlasic.models.graph import (
    CodebaseGraph,
    GraphLink,
    GraphNode,
    HeatMap,
    LinkType,
    NodeCategory,
)

__all__ = [
    "NodeCategory",
    "LinkType",
    "GraphNode",
    "GraphLink",
    "CodebaseGraph",
    "HeatMap",
]

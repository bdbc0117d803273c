"""Barnes-Hut quadtree for approximate many-body repulsion.

Each cell tracks the total mass and centre of mass of the bodies below
it.  When a cell is far enough from the body being evaluated
(``width / distance < theta``) it acts as a single point mass, reducing a
tick's charge computation from O(n^2) to roughly O(n log n).
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from atlasic.layout.arena import LayoutNode
from atlasic.layout.quadtree import bounding_rect

# Squared distance floor; keeps coincident bodies from producing infinite force.
MIN_DISTANCE_SQ = 1.0
# Cells narrower than this stop splitting and hold several bodies.
MIN_CELL_SIZE = 1e-3


class BarnesHutTree:
    """One cell of the Barnes-Hut tree.

    Args:
        x: Left edge.
        y: Top edge.
        w: Width.
        h: Height.
    """

    __slots__ = ("x", "y", "w", "h", "mass", "cx", "cy", "bodies", "children")

    def __init__(self, x: float, y: float, w: float, h: float) -> None:
        self.x = x
        self.y = y
        self.w = w
        self.h = h
        self.mass = 0.0
        self.cx = 0.0
        self.cy = 0.0
        self.bodies: list[LayoutNode] = []
        self.children: Optional[list["BarnesHutTree"]] = None

    @classmethod
    def build(cls, nodes: Sequence[LayoutNode], padding: float = 100.0) -> "BarnesHutTree":
        """Build a tree covering *nodes* from their current positions."""
        bounds = bounding_rect(nodes, padding)
        tree = cls(bounds.x, bounds.y, bounds.w or 1.0, bounds.h or 1.0)
        for node in nodes:
            tree.insert(node)
        return tree

    def insert(self, node: LayoutNode) -> None:
        cell = self
        while True:
            total = cell.mass + 1
            cell.cx = (cell.cx * cell.mass + node.x) / total
            cell.cy = (cell.cy * cell.mass + node.y) / total
            cell.mass = total

            if cell.children is None:
                if not cell.bodies or cell.w < MIN_CELL_SIZE:
                    cell.bodies.append(node)
                    return
                cell._subdivide()
            cell = cell.children[cell._quadrant(node.x, node.y)]

    def _quadrant(self, x: float, y: float) -> int:
        return (1 if x >= self.x + self.w / 2 else 0) + (2 if y >= self.y + self.h / 2 else 0)

    def _subdivide(self) -> None:
        hw, hh = self.w / 2, self.h / 2
        self.children = [
            BarnesHutTree(self.x, self.y, hw, hh),
            BarnesHutTree(self.x + hw, self.y, hw, hh),
            BarnesHutTree(self.x, self.y + hh, hw, hh),
            BarnesHutTree(self.x + hw, self.y + hh, hw, hh),
        ]
        bodies, self.bodies = self.bodies, []
        for body in bodies:
            child = self.children[self._quadrant(body.x, body.y)]
            child.mass += 1
            child.cx += (body.x - child.cx) / child.mass
            child.cy += (body.y - child.cy) / child.mass
            child.bodies.append(body)
            # a child holding two bodies is split lazily by the next insert

    def force_on(self, node: LayoutNode, theta: float, strength: float) -> tuple[float, float]:
        """Net force on *node* from every other body in the tree.

        Args:
            node: Body being evaluated.
            theta: Accuracy threshold; larger is faster and coarser.
            strength: Charge strength, negative for repulsion.

        Returns:
            ``(fx, fy)`` to add to the node's velocity.
        """
        fx = 0.0
        fy = 0.0
        stack: list[BarnesHutTree] = [self]
        while stack:
            cell = stack.pop()
            if cell.mass == 0:
                continue

            if cell.children is None:
                for body in cell.bodies:
                    if body is node:
                        continue
                    dx = body.x - node.x
                    dy = body.y - node.y
                    d2 = max(dx * dx + dy * dy, MIN_DISTANCE_SQ)
                    dist = math.sqrt(d2)
                    force = strength / d2
                    fx += dx / dist * force
                    fy += dy / dist * force
                continue

            dx = cell.cx - node.x
            dy = cell.cy - node.y
            d2 = max(dx * dx + dy * dy, MIN_DISTANCE_SQ)
            dist = math.sqrt(d2)
            if cell.w / dist < theta:
                force = strength * cell.mass / d2
                fx += dx / dist * force
                fy += dy / dist * force
            else:
                stack.extend(cell.children)
        return fx, fy

"""Region quadtree over node positions for pointer hit-testing.

Positions move every tick, so the tree is cheap to rebuild and is thrown
away rather than updated in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, TypeVar


class Positioned(Protocol):
    x: float
    y: float


P = TypeVar("P", bound=Positioned)

DEFAULT_CAPACITY = 8
MAX_DEPTH = 24


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; ``contains`` includes all four edges."""

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def around(cls, x: float, y: float, radius: float) -> "Rect":
        return cls(x - radius, y - radius, radius * 2, radius * 2)

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def intersects(self, other: "Rect") -> bool:
        return not (
            self.right < other.x
            or other.right < self.x
            or self.bottom < other.y
            or other.bottom < self.y
        )

    def expanded(self, padding: float) -> "Rect":
        return Rect(self.x - padding, self.y - padding, self.w + 2 * padding, self.h + 2 * padding)


def bounding_rect(points: Iterable[Positioned], padding: float = 0.0) -> Rect:
    """Smallest rectangle around *points*, grown by *padding*."""
    xs: list[float] = []
    ys: list[float] = []
    for p in points:
        xs.append(p.x)
        ys.append(p.y)
    if not xs:
        return Rect(-padding, -padding, 2 * padding, 2 * padding)
    min_x, min_y = min(xs), min(ys)
    return Rect(min_x, min_y, max(xs) - min_x, max(ys) - min_y).expanded(padding)


class Quadtree:
    """Point quadtree with leaf capacity and subdivision on overflow.

    Args:
        bounds: Region covered by this node.
        capacity: Points a leaf holds before it splits.
        depth: Depth of this node; splitting stops at :data:`MAX_DEPTH`
            so coincident points cannot recurse forever.
    """

    __slots__ = ("bounds", "capacity", "depth", "points", "children")

    def __init__(self, bounds: Rect, capacity: int = DEFAULT_CAPACITY, depth: int = 0) -> None:
        self.bounds = bounds
        self.capacity = max(1, capacity)
        self.depth = depth
        self.points: list[Positioned] = []
        self.children: Optional[tuple["Quadtree", "Quadtree", "Quadtree", "Quadtree"]] = None

    @classmethod
    def build(
        cls,
        points: Sequence[P],
        capacity: int = DEFAULT_CAPACITY,
        padding: float = 1000.0,
    ) -> "Quadtree":
        """Build a tree whose bounds cover every point in *points*."""
        tree = cls(bounding_rect(points, padding), capacity)
        for point in points:
            tree.insert(point)
        return tree

    def __len__(self) -> int:
        if self.children is None:
            return len(self.points)
        return sum(len(child) for child in self.children)

    def insert(self, point: Positioned) -> bool:
        """Insert *point*; returns ``False`` if it lies outside the bounds."""
        if not self.bounds.contains(point.x, point.y):
            return False
        node = self
        while node.children is not None:
            node = node.children[node._quadrant(point.x, point.y)]
        node.points.append(point)
        if len(node.points) > node.capacity and node.depth < MAX_DEPTH:
            node._subdivide()
        return True

    def _quadrant(self, x: float, y: float) -> int:
        b = self.bounds
        return (1 if x >= b.x + b.w / 2 else 0) + (2 if y >= b.y + b.h / 2 else 0)

    def _subdivide(self) -> None:
        x, y, hw, hh = self.bounds.x, self.bounds.y, self.bounds.w / 2, self.bounds.h / 2
        depth = self.depth + 1
        self.children = (
            Quadtree(Rect(x, y, hw, hh), self.capacity, depth),
            Quadtree(Rect(x + hw, y, hw, hh), self.capacity, depth),
            Quadtree(Rect(x, y + hh, hw, hh), self.capacity, depth),
            Quadtree(Rect(x + hw, y + hh, hw, hh), self.capacity, depth),
        )
        points, self.points = self.points, []
        for point in points:
            child = self.children[self._quadrant(point.x, point.y)]
            child.points.append(point)
        for child in self.children:
            if len(child.points) > child.capacity and child.depth < MAX_DEPTH:
                child._subdivide()

    def query(self, rect: Rect, found: list | None = None) -> list:
        """Return every inserted point lying inside *rect* (edges included)."""
        if found is None:
            found = []
        stack = [self]
        while stack:
            node = stack.pop()
            if not node.bounds.intersects(rect):
                continue
            if node.children is not None:
                stack.extend(node.children)
                continue
            for point in node.points:
                if rect.contains(point.x, point.y):
                    found.append(point)
        return found

    def find_nearest(self, x: float, y: float, radius: float) -> Optional[Positioned]:
        """Closest point within *radius* of ``(x, y)``, or ``None``.

        A box query narrows the search to a handful of candidates, which
        are then compared by exact distance.
        """
        closest = None
        best = radius * radius
        for point in self.query(Rect.around(x, y, radius)):
            dx = point.x - x
            dy = point.y - y
            d2 = dx * dx + dy * dy
            if d2 <= best:
                best = d2
                closest = point
        return closest

"""Force-directed layout: link springs, Barnes-Hut repulsion, centring, collision.

The simulation is driven by ``alpha``, a temperature that decays toward
``alpha_target`` every tick.  Forces are scaled by ``alpha`` so the
layout moves a lot at first and then settles; once ``alpha`` falls below
``alpha_min`` it snaps to zero and ticks stop moving nodes.

Graph size picks a :class:`SizeTier`, and :meth:`SimulationParams.for_size`
turns that tier into concrete quality/performance settings.
"""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass, replace
from typing import Optional

import structlog

from atlasic.layout.arena import Edge, LayoutGraph
from atlasic.layout.barnes_hut import BarnesHutTree

logger = structlog.get_logger(__name__)

LARGE_GRAPH_NODES = 200
HUGE_GRAPH_NODES = 5_000
MASSIVE_GRAPH_NODES = 20_000

DRAG_ALPHA = 0.3


class SizeTier(str, enum.Enum):
    SMALL = "small"
    LARGE = "large"
    HUGE = "huge"
    MASSIVE = "massive"

    @classmethod
    def for_count(cls, node_count: int) -> "SizeTier":
        if node_count > MASSIVE_GRAPH_NODES:
            return cls.MASSIVE
        if node_count > HUGE_GRAPH_NODES:
            return cls.HUGE
        if node_count > LARGE_GRAPH_NODES:
            return cls.LARGE
        return cls.SMALL


@dataclass(frozen=True)
class SimulationParams:
    """Tunable constants of the simulation and its companions.

    Attributes:
        tier: Size tier these parameters were derived for.
        alpha_start: Initial temperature.
        alpha_decay: Fraction of the gap to ``alpha_target`` closed per tick.
        alpha_min: Below this, alpha snaps to zero and the layout is settled.
        link_distance: Spring rest length.
        link_strength: Spring stiffness.
        charge_strength: Many-body strength (negative repels).
        theta: Barnes-Hut accuracy threshold.
        center_strength: Pull toward the viewport centre.
        collision: Whether pairwise overlap correction runs at all.
        collision_max_nodes: Collision is skipped at or above this count.
        collision_radius: Per-node radius; nodes closer than twice this
            are pushed apart.
        velocity_decay: Velocity multiplier applied each tick.
        link_sample_limit: When set and exceeded, the link force uses a
            random sample of about this many edges.
        charge_sample_size: When set, charge is applied to this many nodes
            per tick, rotating through the graph.
        bh_padding: Padding around the Barnes-Hut root cell.
        quadtree_capacity: Leaf capacity of the hit-test index.
        index_rebuild_every: Rebuild the hit-test index every N frames.
        render_every: Render every N frames while the layout is moving.
        max_links_per_frame: Upper bound on edges stroked in one frame.
    """

    tier: SizeTier = SizeTier.SMALL
    alpha_start: float = 1.0
    alpha_decay: float = 0.02
    alpha_min: float = 0.001
    link_distance: float = 80.0
    link_strength: float = 0.5
    charge_strength: float = -400.0
    theta: float = 0.9
    center_strength: float = 0.01
    collision: bool = True
    collision_max_nodes: int = 500
    collision_radius: float = 35.0
    velocity_decay: float = 0.6
    link_sample_limit: Optional[int] = None
    charge_sample_size: Optional[int] = None
    bh_padding: float = 100.0
    quadtree_capacity: int = 8
    index_rebuild_every: int = 1
    render_every: int = 1
    max_links_per_frame: int = 50_000

    @classmethod
    def for_size(cls, node_count: int) -> "SimulationParams":
        """Derive parameters for a graph of *node_count* nodes."""
        tier = SizeTier.for_count(node_count)
        base = cls(tier=tier)
        if tier is SizeTier.LARGE:
            return replace(base, alpha_decay=0.05)
        if tier is SizeTier.HUGE:
            return replace(base, alpha_decay=0.08, theta=1.2, collision=False)
        if tier is SizeTier.MASSIVE:
            return replace(
                base,
                alpha_start=0.5,
                alpha_decay=0.15,
                theta=1.5,
                center_strength=0.005,
                collision=False,
                velocity_decay=0.4,
                link_sample_limit=10_000,
                charge_sample_size=5_000,
                index_rebuild_every=3,
                render_every=3,
            )
        return base

    def collision_enabled(self, node_count: int) -> bool:
        return self.collision and node_count < self.collision_max_nodes


class ForceSimulation:
    """Physics integrator over a :class:`LayoutGraph`.

    Args:
        graph: Arena whose node positions are updated in place.
        params: Tuning; defaults to :meth:`SimulationParams.for_size`.
        width: Viewport width; the centring force targets its middle.
        height: Viewport height.
        rng: Random source for link sampling.
    """

    def __init__(
        self,
        graph: LayoutGraph,
        params: SimulationParams | None = None,
        width: float = 800.0,
        height: float = 600.0,
        rng: random.Random | None = None,
    ) -> None:
        self.graph = graph
        self.params = params or SimulationParams.for_size(len(graph.nodes))
        self.width = width
        self.height = height
        self.alpha = self.params.alpha_start
        self.alpha_target = 0.0
        self.ticks = 0
        self._charge_offset = 0
        self._rng = rng or random.Random()
        self.links = self._sample_links(graph.edges)

        if self.params.tier is not SizeTier.SMALL:
            logger.info(
                "simulation_tier",
                tier=self.params.tier.value,
                nodes=len(graph.nodes),
                links=len(graph.edges),
                simulated_links=len(self.links),
            )

    def _sample_links(self, edges: list[Edge]) -> list[Edge]:
        limit = self.params.link_sample_limit
        if limit is None or len(edges) <= limit:
            return list(edges)
        rate = limit / len(edges)
        return [edge for edge in edges if self._rng.random() < rate]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def settled(self) -> bool:
        return self.alpha == 0

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def reheat(self, alpha: float = DRAG_ALPHA) -> None:
        """Keep the layout hot, e.g. while a node is dragged."""
        self.alpha = max(self.alpha, alpha)
        self.alpha_target = alpha

    def cool(self) -> None:
        """Let alpha decay back toward zero."""
        self.alpha_target = 0.0

    def restart(self) -> None:
        self.alpha = self.params.alpha_start

    def pin(self, index: int, x: float, y: float) -> None:
        node = self.graph.nodes[index]
        node.fx = x
        node.fy = y

    def unpin(self, index: int) -> None:
        node = self.graph.nodes[index]
        node.fx = None
        node.fy = None

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Advance one step.

        Returns:
            ``True`` if positions were updated, ``False`` once settled.
        """
        self.alpha += (self.alpha_target - self.alpha) * self.params.alpha_decay
        if self.alpha < self.params.alpha_min:
            self.alpha = 0.0
            return False

        nodes = self.graph.nodes
        if not nodes:
            return True

        self._apply_links()
        self._apply_charge()
        self._apply_center()
        if self.params.collision_enabled(len(nodes)):
            self._apply_collision()
        self._integrate()
        self.ticks += 1
        return True

    def run(self, max_ticks: int = 300) -> int:
        """Tick until settled or *max_ticks*; returns the ticks taken."""
        taken = 0
        while taken < max_ticks and self.tick():
            taken += 1
        return taken

    def _apply_links(self) -> None:
        nodes = self.graph.nodes
        rest = self.params.link_distance
        k = self.params.link_strength * self.alpha
        for edge in self.links:
            source = nodes[edge.source]
            target = nodes[edge.target]
            dx = target.x - source.x
            dy = target.y - source.y
            dist = math.sqrt(dx * dx + dy * dy) or 1.0
            force = (dist - rest) * k
            dx = dx / dist * force
            dy = dy / dist * force
            target.vx -= dx
            target.vy -= dy
            source.vx += dx
            source.vy += dy

    def _charge_nodes(self) -> list:
        nodes = self.graph.nodes
        size = self.params.charge_sample_size
        if size is None or size >= len(nodes):
            return nodes
        start = self._charge_offset
        self._charge_offset = (start + size) % len(nodes)
        window = nodes[start : start + size]
        if len(window) < size:
            window = window + nodes[: size - len(window)]
        return window

    def _apply_charge(self) -> None:
        tree = BarnesHutTree.build(self.graph.nodes, self.params.bh_padding)
        theta = self.params.theta
        strength = self.params.charge_strength * self.alpha
        for node in self._charge_nodes():
            fx, fy = tree.force_on(node, theta, strength)
            node.vx += fx
            node.vy += fy

    def _apply_center(self) -> None:
        cx = self.width / 2
        cy = self.height / 2
        k = self.params.center_strength * self.alpha
        for node in self.graph.nodes:
            node.vx += (cx - node.x) * k
            node.vy += (cy - node.y) * k

    def _apply_collision(self) -> None:
        nodes = self.graph.nodes
        min_dist = self.params.collision_radius * 2
        count = len(nodes)
        for i in range(count):
            a = nodes[i]
            for j in range(i + 1, count):
                b = nodes[j]
                dx = b.x - a.x
                dy = b.y - a.y
                dist = math.sqrt(dx * dx + dy * dy) or 1.0
                if dist < min_dist:
                    force = (min_dist - dist) * 0.5 * self.alpha
                    fx = dx / dist * force
                    fy = dy / dist * force
                    a.vx -= fx
                    a.vy -= fy
                    b.vx += fx
                    b.vy += fy

    def _integrate(self) -> None:
        decay = self.params.velocity_decay
        for node in self.graph.nodes:
            if node.fx is not None:
                node.x = node.fx
                node.vx = 0.0
            else:
                node.vx *= decay
                node.x += node.vx
            if node.fy is not None:
                node.y = node.fy
                node.vy = 0.0
            else:
                node.vy *= decay
                node.y += node.vy

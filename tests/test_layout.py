"""Tests for arena resolution, Barnes-Hut and the force simulation."""

import math
import random

import pytest

from atlasic.layout.arena import DanglingLinkError, LayoutNode, resolve_graph
from atlasic.layout.barnes_hut import BarnesHutTree
from atlasic.layout.simulation import ForceSimulation, SimulationParams, SizeTier
from atlasic.models.graph import CodebaseGraph, GraphLink, GraphNode


def _node(index, x, y):
    return LayoutNode(index=index, id=str(index), label=str(index), category="other", language="", x=x, y=y)


def _chain_graph(n):
    nodes = [GraphNode(id=f"/n{i}.ts", label=f"n{i}.ts") for i in range(n)]
    links = [GraphLink(source=f"/n{i}.ts", target=f"/n{i + 1}.ts") for i in range(n - 1)]
    return CodebaseGraph(nodes=nodes, links=links)


class TestResolveGraph:
    def test_edges_become_indices(self, triangle_graph):
        layout = resolve_graph(triangle_graph, rng=random.Random(0))

        assert [n.id for n in layout.nodes] == ["/p/a.ts", "/p/b.ts", "/p/c.ts"]
        assert [(e.source, e.target) for e in layout.edges] == [(0, 1), (1, 2), (0, 2)]
        assert [n.in_degree for n in layout.nodes] == [0, 1, 2]
        assert layout.max_in_degree == 2
        assert layout.incident_edges(1) == {0, 1}
        assert layout.node("/p/c.ts").index == 2

    def test_max_in_degree_is_at_least_one(self):
        layout = resolve_graph(_chain_graph(1))
        assert layout.nodes[0].in_degree == 0
        assert layout.max_in_degree == 1

    def test_dangling_link_is_a_construction_error(self, triangle_graph):
        triangle_graph.links.append(GraphLink(source="/p/a.ts", target="/p/ghost.ts"))
        with pytest.raises(DanglingLinkError) as excinfo:
            resolve_graph(triangle_graph)
        assert excinfo.value.missing == "/p/ghost.ts"
        assert isinstance(excinfo.value, ValueError)

    def test_non_strict_drops_and_counts(self, triangle_graph):
        triangle_graph.links.append(GraphLink(source="/p/ghost.ts", target="/p/a.ts"))
        layout = resolve_graph(triangle_graph, strict=False)
        assert len(layout.edges) == 3
        assert layout.dropped_links == 1

    def test_initial_scatter_is_reproducible_and_centred(self, triangle_graph):
        a = resolve_graph(triangle_graph, width=800, height=600, rng=random.Random(3))
        b = resolve_graph(triangle_graph, width=800, height=600, rng=random.Random(3))
        assert [(n.x, n.y) for n in a.nodes] == [(n.x, n.y) for n in b.nodes]
        assert all(200 <= n.x <= 600 and 100 <= n.y <= 500 for n in a.nodes)


class TestBarnesHut:
    def test_two_bodies_repel(self):
        a, b = _node(0, 0, 0), _node(1, 10, 0)
        tree = BarnesHutTree.build([a, b])
        fx, fy = tree.force_on(a, theta=0.0, strength=-100.0)
        assert fx == pytest.approx(-1.0)
        assert fy == pytest.approx(0.0)

    def test_theta_zero_is_exact(self):
        rng = random.Random(11)
        nodes = [_node(i, rng.uniform(0, 400), rng.uniform(0, 400)) for i in range(60)]
        tree = BarnesHutTree.build(nodes)
        target = nodes[0]

        ex = ey = 0.0
        for other in nodes[1:]:
            dx, dy = other.x - target.x, other.y - target.y
            d2 = max(dx * dx + dy * dy, 1.0)
            dist = math.sqrt(d2)
            ex += dx / dist * (-30.0 / d2)
            ey += dy / dist * (-30.0 / d2)

        fx, fy = tree.force_on(target, theta=0.0, strength=-30.0)
        assert fx == pytest.approx(ex, rel=1e-9, abs=1e-12)
        assert fy == pytest.approx(ey, rel=1e-9, abs=1e-12)

    def test_mass_and_centre(self):
        nodes = [_node(0, 0, 0), _node(1, 10, 0), _node(2, 20, 30)]
        tree = BarnesHutTree.build(nodes)
        assert tree.mass == 3
        assert tree.cx == pytest.approx(10.0)
        assert tree.cy == pytest.approx(10.0)

    def test_coincident_bodies_are_finite(self):
        a, b = _node(0, 5, 5), _node(1, 5, 5)
        fx, fy = BarnesHutTree.build([a, b]).force_on(a, 0.9, -400)
        assert math.isfinite(fx) and math.isfinite(fy)


class TestSimulationParams:
    @pytest.mark.parametrize(
        "count, tier",
        [(200, SizeTier.SMALL), (201, SizeTier.LARGE), (5001, SizeTier.HUGE), (20001, SizeTier.MASSIVE)],
    )
    def test_tier_thresholds(self, count, tier):
        assert SimulationParams.for_size(count).tier is tier

    def test_theta_widens_with_size(self):
        thetas = [SimulationParams.for_size(n).theta for n in (10, 6000, 30000)]
        assert thetas == sorted(thetas) and thetas[0] < thetas[-1]

    def test_large_tiers_drop_collision_and_sample(self):
        huge = SimulationParams.for_size(6000)
        massive = SimulationParams.for_size(30000)
        assert not huge.collision_enabled(6000)
        assert massive.link_sample_limit == 10_000
        assert massive.charge_sample_size == 5_000
        assert massive.render_every > 1

    def test_collision_node_threshold(self):
        params = SimulationParams.for_size(10)
        assert params.collision_enabled(499)
        assert not params.collision_enabled(500)


class TestForceSimulation:
    def test_alpha_decays_monotonically_to_zero(self):
        layout = resolve_graph(_chain_graph(12), rng=random.Random(1))
        sim = ForceSimulation(layout, rng=random.Random(1))

        previous = sim.alpha
        assert previous == 1.0
        for _ in range(2000):
            moving = sim.tick()
            assert sim.alpha <= previous
            previous = sim.alpha
            if not moving:
                break
        assert sim.alpha == 0.0
        assert sim.settled

    def test_settled_ticks_do_not_move_nodes(self):
        layout = resolve_graph(_chain_graph(8), rng=random.Random(2))
        sim = ForceSimulation(layout, rng=random.Random(2))
        sim.run(max_ticks=5000)

        before = [(n.x, n.y) for n in layout.nodes]
        for _ in range(5):
            assert sim.tick() is False
        assert [(n.x, n.y) for n in layout.nodes] == before

    def test_linked_nodes_end_closer_than_unlinked(self):
        graph = _chain_graph(2)
        graph.nodes.append(GraphNode(id="/lonely.ts", label="lonely.ts"))
        layout = resolve_graph(graph, rng=random.Random(4))
        ForceSimulation(layout, rng=random.Random(4)).run(1000)

        a, b, _ = layout.nodes
        linked = math.hypot(a.x - b.x, a.y - b.y)
        assert linked < 200

    def test_pinned_node_snaps_and_stops(self):
        layout = resolve_graph(_chain_graph(4), rng=random.Random(5))
        sim = ForceSimulation(layout, rng=random.Random(5))
        sim.pin(0, 42.0, -7.0)
        sim.tick()

        node = layout.nodes[0]
        assert (node.x, node.y) == (42.0, -7.0)
        assert (node.vx, node.vy) == (0.0, 0.0)
        assert node.pinned

        sim.unpin(0)
        assert not node.pinned

    def test_reheat_keeps_layout_hot_until_cooled(self):
        layout = resolve_graph(_chain_graph(4), rng=random.Random(6))
        sim = ForceSimulation(layout, rng=random.Random(6))
        sim.run(5000)
        assert sim.settled

        sim.reheat(0.3)
        for _ in range(500):
            sim.tick()
        assert sim.alpha == pytest.approx(0.3)

        sim.cool()
        sim.run(5000)
        assert sim.settled

    def test_link_sampling_bounds_simulated_edges(self):
        layout = resolve_graph(_chain_graph(300), rng=random.Random(8))
        params = SimulationParams(link_sample_limit=50)
        sim = ForceSimulation(layout, params, rng=random.Random(8))
        assert 0 < len(sim.links) < len(layout.edges)

    def test_charge_window_rotates(self):
        layout = resolve_graph(_chain_graph(10), rng=random.Random(9))
        sim = ForceSimulation(layout, SimulationParams(charge_sample_size=4), rng=random.Random(9))
        first = [n.index for n in sim._charge_nodes()]
        second = [n.index for n in sim._charge_nodes()]
        third = [n.index for n in sim._charge_nodes()]
        assert first == [0, 1, 2, 3]
        assert second == [4, 5, 6, 7]
        assert third == [8, 9, 0, 1]

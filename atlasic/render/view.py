"""Owned visualizer handle wiring simulation, index, renderer and input.

A :class:`GraphView` is created per graph and driven by a host that calls
:meth:`GraphView.frame` once per display refresh, forwarding pointer and
keyboard events in between.  Nothing here is global; several views can
coexist and each can be closed independently.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Callable, Optional

import structlog

from atlasic.config import Settings, settings as default_settings
from atlasic.layout.arena import LayoutNode, resolve_graph
from atlasic.layout.quadtree import Quadtree
from atlasic.layout.simulation import ForceSimulation, SimulationParams, SizeTier
from atlasic.models.graph import CodebaseGraph, HeatMap
from atlasic.render.camera import Camera
from atlasic.render.colors import ColorMode, ColorModel
from atlasic.render.commands import Frame
from atlasic.render.interaction import InteractionController, InteractionState
from atlasic.render.renderer import Renderer
from atlasic.render.search import SearchBox

logger = structlog.get_logger(__name__)

OpenFileListener = Callable[[str], None]
GraphReadyListener = Callable[[CodebaseGraph], None]


class ViewClosedError(RuntimeError):
    """Raised when a closed :class:`GraphView` is asked to load a graph."""


class GraphView:
    """Interactive view of one :class:`CodebaseGraph`.

    Args:
        graph: Graph to show.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        rng: Random source for the initial scatter and link sampling.
        params: Simulation parameters; derived from the node count when
            omitted.
        strict: Reject graphs with dangling links instead of dropping them.
        config: Settings to read visualizer defaults from.
    """

    def __init__(
        self,
        graph: CodebaseGraph,
        width: float = 800.0,
        height: float = 600.0,
        *,
        rng: random.Random | None = None,
        params: SimulationParams | None = None,
        strict: bool = True,
        config: Settings | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.strict = strict
        self.closed = False
        self.dirty = True
        self.frame_count = 0
        self._config = config or default_settings
        self._rng = rng or random.Random()
        self._params_override = params
        self._open_file_listeners: list[OpenFileListener] = []
        self._ready_listeners: list[GraphReadyListener] = []
        self._heat: Optional[HeatMap] = None

        self.camera = Camera()
        self.colors = ColorModel()
        self.search = SearchBox(
            [],
            limit=self._config.search_limit,
            debounce_ms=self._config.search_debounce_ms,
        )
        self._install(graph)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _install(self, graph: CodebaseGraph) -> None:
        layout = resolve_graph(
            graph,
            strict=self.strict,
            width=self.width,
            height=self.height,
            rng=self._rng,
        )
        params = self._params_override or SimulationParams.for_size(len(layout.nodes))
        if self._params_override is None:
            params = replace(params, quadtree_capacity=self._config.quadtree_capacity)

        self.graph = graph
        self.layout = layout
        self.params = params
        self.simulation = ForceSimulation(layout, params, self.width, self.height, rng=self._rng)
        self.renderer = Renderer(layout, params, self.colors)
        self.colors.max_in_degree = layout.max_in_degree
        self.controller = InteractionController(
            layout,
            self.simulation,
            self.camera,
            self.width,
            self.height,
            hit_radius=self._config.hit_radius,
            double_click_ms=self._config.double_click_ms,
            on_open_file=self._emit_open_file,
        )
        self.search.set_nodes(layout.nodes)
        self.frame_count = 0
        self.rebuild_index()
        if self._heat is not None:
            self._assign_heat(self._heat)
        self.dirty = True

        logger.info(
            "graph_ready",
            nodes=len(layout.nodes),
            links=len(layout.edges),
            tier=params.tier.value,
        )
        for listener in list(self._ready_listeners):
            listener(graph)

    def load(self, graph: CodebaseGraph) -> None:
        """Replace the shown graph, keeping camera, colour mode and listeners."""
        if self.closed:
            raise ViewClosedError("view is closed")
        self._install(graph)

    def close(self) -> None:
        """Stop producing frames and drop all listeners."""
        if self.closed:
            return
        self.closed = True
        self.simulation.alpha = 0.0
        self._open_file_listeners.clear()
        self._ready_listeners.clear()
        self.controller.index = None
        logger.debug("view_closed")

    def on_open_file(self, listener: OpenFileListener) -> Callable[[], None]:
        """Subscribe to double-click "open this file" signals.

        Returns:
            A callable that removes the listener.
        """
        self._open_file_listeners.append(listener)
        return lambda: self._remove(self._open_file_listeners, listener)

    def on_graph_ready(self, listener: GraphReadyListener) -> Callable[[], None]:
        self._ready_listeners.append(listener)
        return lambda: self._remove(self._ready_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _emit_open_file(self, node_id: str) -> None:
        for listener in list(self._open_file_listeners):
            listener(node_id)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def rebuild_index(self) -> None:
        self.controller.index = Quadtree.build(self.layout.nodes, self.params.quadtree_capacity)

    def frame(self, now: float) -> Optional[Frame]:
        """Advance one display refresh.

        Ticks the simulation while it is hot, steps the camera animation
        and the click/search timers, and renders if anything changed.
        Massive graphs rebuild the hit-test index and render only every
        few frames while the layout is moving.

        Args:
            now: Current time in milliseconds.

        Returns:
            The new frame, or ``None`` when nothing needs repainting or
            the view is closed.
        """
        if self.closed:
            return None

        self.controller.poll(now)
        self.search.poll(now)
        if self.camera.step(now):
            self.dirty = True

        massive = self.params.tier is SizeTier.MASSIVE
        if not self.simulation.settled:
            self.frame_count += 1
            if self.simulation.tick():
                self.dirty = True
                if not massive and self.frame_count % self.params.index_rebuild_every == 0:
                    self.rebuild_index()
            else:
                self.dirty = True

        if not self.dirty:
            return None
        if not self.simulation.settled and self.frame_count % self.params.render_every != 0:
            return None
        if massive:
            self.rebuild_index()
        self.dirty = False
        return self.renderer.render(
            self.camera, self.width, self.height, self.controller.render_state()
        )

    def render(self) -> Frame:
        """Render the current state regardless of the dirty flag."""
        self.dirty = False
        return self.renderer.render(
            self.camera, self.width, self.height, self.controller.render_state()
        )

    def run_until_settled(self, max_ticks: int = 300) -> int:
        """Tick without rendering; returns the number of ticks taken."""
        taken = self.simulation.run(max_ticks)
        self.rebuild_index()
        self.dirty = True
        return taken

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.simulation.resize(width, height)
        self.controller.resize(width, height)
        self.dirty = True

    # ------------------------------------------------------------------
    # Colouring
    # ------------------------------------------------------------------

    def set_color_mode(self, mode: ColorMode | str) -> None:
        self.colors.mode = ColorMode(mode)
        self.dirty = True

    def apply_heat(self, heat: HeatMap) -> None:
        """Recolour from an external heat map without rebuilding anything."""
        self._heat = heat
        self._assign_heat(heat)
        self.dirty = True

    def _assign_heat(self, heat: HeatMap) -> None:
        for node in self.layout.nodes:
            node.heat = heat.scores.get(node.id, 0.0)
        self.colors.max_heat = heat.max_score

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    @property
    def interaction_state(self) -> InteractionState:
        return self.controller.state

    @property
    def cursor(self) -> str:
        return self.controller.cursor

    def pointer_down(self, sx: float, sy: float) -> InteractionState:
        self.dirty = True
        return self.controller.pointer_down(sx, sy)

    def pointer_move(self, sx: float, sy: float) -> None:
        before = self.controller.hovered
        self.controller.pointer_move(sx, sy)
        if self.controller.state is not InteractionState.IDLE or self.controller.hovered is not before:
            self.dirty = True

    def pointer_up(self) -> None:
        self.controller.pointer_up()
        self.dirty = True

    def pointer_leave(self) -> None:
        if self.controller.hovered is not None:
            self.dirty = True
        self.controller.pointer_leave()

    def click(self, sx: float, sy: float, now: float) -> None:
        self.controller.click(sx, sy, now)
        self.dirty = True

    def wheel(self, sx: float, sy: float, delta_y: float) -> None:
        self.controller.wheel(sx, sy, delta_y)
        self.dirty = True

    def search_input(self, text: str, now: float) -> None:
        self.search.input(text, now)

    def search_key_down(self) -> None:
        self.search.key_down()

    def search_key_up(self) -> None:
        self.search.key_up()

    def search_enter(self, now: float) -> Optional[LayoutNode]:
        """Select the node chosen in the search box, if any."""
        node = self.search.enter()
        if node is not None:
            self.controller.select(node, now)
            self.search.clear()
            self.dirty = True
        return node

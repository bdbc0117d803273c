"""Pointer interaction: drag, pan, hover, click/double-click, wheel zoom."""

from __future__ import annotations

import enum
from typing import Callable, Optional

import structlog

from atlasic.layout.arena import LayoutGraph, LayoutNode
from atlasic.layout.quadtree import Quadtree
from atlasic.layout.simulation import DRAG_ALPHA, ForceSimulation
from atlasic.render.camera import Camera
from atlasic.render.renderer import RenderState

logger = structlog.get_logger(__name__)

DEFAULT_HIT_RADIUS = 12.0
DEFAULT_DOUBLE_CLICK_MS = 350.0


class InteractionState(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    PANNING = "panning"


class InteractionController:
    """Pointer state machine over one graph.

    ``idle -> dragging`` on pointer-down over a node, ``idle -> panning``
    on pointer-down over empty canvas; both return to ``idle`` on
    pointer-up.  Hover is tracked separately on every move while idle.

    The first click on a node highlights it and starts a timer; a second
    click on the same node before the timer expires calls *on_open_file*
    instead.

    Args:
        graph: Arena being interacted with.
        simulation: Simulation to pin/reheat while dragging.
        camera: Camera to pan, zoom and focus.
        width: Viewport width.
        height: Viewport height.
        hit_radius: Pick radius in world units.
        double_click_ms: Double-click window.
        on_open_file: Called with the node id on double-click.
    """

    def __init__(
        self,
        graph: LayoutGraph,
        simulation: ForceSimulation,
        camera: Camera,
        width: float,
        height: float,
        hit_radius: float = DEFAULT_HIT_RADIUS,
        double_click_ms: float = DEFAULT_DOUBLE_CLICK_MS,
        on_open_file: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.graph = graph
        self.simulation = simulation
        self.camera = camera
        self.width = width
        self.height = height
        self.hit_radius = hit_radius
        self.double_click_ms = double_click_ms
        self.on_open_file = on_open_file
        self.index: Optional[Quadtree] = None

        self.state = InteractionState.IDLE
        self.hovered: Optional[LayoutNode] = None
        self.highlighted: Optional[LayoutNode] = None
        self.highlighted_edges: set[int] = set()
        self._dragged: Optional[LayoutNode] = None
        self._last: tuple[float, float] = (0.0, 0.0)
        self._click_node: Optional[LayoutNode] = None
        self._click_deadline: Optional[float] = None

    @property
    def cursor(self) -> str:
        if self.state is not InteractionState.IDLE:
            return "grabbing"
        return "pointer" if self.hovered is not None else "grab"

    @property
    def click_pending(self) -> bool:
        return self._click_deadline is not None

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def hit_test(self, sx: float, sy: float) -> Optional[LayoutNode]:
        """Node under screen point ``(sx, sy)``, or ``None``."""
        if self.index is None:
            return None
        wx, wy = self.camera.screen_to_world(sx, sy)
        return self.index.find_nearest(wx, wy, self.hit_radius)

    def render_state(self) -> RenderState:
        return RenderState(
            highlighted=None if self.highlighted is None else self.highlighted.index,
            hovered=None if self.hovered is None else self.hovered.index,
            highlighted_edges=set(self.highlighted_edges),
        )

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, sx: float, sy: float) -> InteractionState:
        node = self.hit_test(sx, sy)
        self._last = (sx, sy)
        if node is not None:
            self.state = InteractionState.DRAGGING
            self._dragged = node
            self.simulation.pin(node.index, node.x, node.y)
            self.simulation.reheat(DRAG_ALPHA)
        else:
            self.state = InteractionState.PANNING
        return self.state

    def pointer_move(self, sx: float, sy: float) -> None:
        if self.state is InteractionState.DRAGGING and self._dragged is not None:
            wx, wy = self.camera.screen_to_world(sx, sy)
            self.simulation.pin(self._dragged.index, wx, wy)
        elif self.state is InteractionState.PANNING:
            lx, ly = self._last
            self.camera.pan(sx - lx, sy - ly)
        else:
            self.hovered = self.hit_test(sx, sy)
        self._last = (sx, sy)

    def pointer_up(self) -> None:
        if self._dragged is not None:
            self.simulation.unpin(self._dragged.index)
            self.simulation.cool()
            self._dragged = None
        self.state = InteractionState.IDLE

    def pointer_leave(self) -> None:
        self.hovered = None

    def wheel(self, sx: float, sy: float, delta_y: float) -> None:
        self.camera.zoom_at(sx, sy, delta_y)

    # ------------------------------------------------------------------
    # Clicks and selection
    # ------------------------------------------------------------------

    def click(self, sx: float, sy: float, now: float) -> None:
        node = self.hit_test(sx, sy)
        if node is None:
            self._cancel_click()
            self.clear_highlight()
            return

        if self._click_deadline is not None and self._click_node is node and now <= self._click_deadline:
            self._cancel_click()
            logger.debug("open_file_requested", node=node.id)
            if self.on_open_file is not None:
                self.on_open_file(node.id)
            return

        self.select(node, now)
        self._click_node = node
        self._click_deadline = now + self.double_click_ms

    def poll(self, now: float) -> None:
        """Expire the double-click window once it has elapsed."""
        if self._click_deadline is not None and now > self._click_deadline:
            self._cancel_click()

    def select(self, node: LayoutNode, now: float) -> None:
        """Highlight *node* and its incident edges and fly the camera to it."""
        self.highlighted = node
        self.highlighted_edges = self.graph.incident_edges(node.index)
        self.camera.focus(node.x, node.y, self.width, self.height, now)

    def clear_highlight(self) -> None:
        self.highlighted = None
        self.highlighted_edges = set()

    def _cancel_click(self) -> None:
        self._click_node = None
        self._click_deadline = None

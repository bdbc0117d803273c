"""Viewport-culled, level-of-detail frame builder.

:meth:`Renderer.render` is a pure function of the layout positions, the
camera and the interaction state: it returns a :class:`Frame` of draw
commands and mutates nothing.

Detail rules, by zoom scale ``k`` and size tier:

- labels only when ``k > 0.3`` (``k > 1`` on massive graphs)
- arrowheads only when ``k > 0.2`` and the graph is not massive;
  highlighted edges always get one
- massive graphs below ``k = 0.5`` draw nodes as small squares with no
  stroke or shadow
- at most ``max_links_per_frame`` edges are stroked per frame
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from atlasic.layout.arena import LayoutGraph, LayoutNode
from atlasic.layout.quadtree import Rect
from atlasic.layout.simulation import SimulationParams, SizeTier
from atlasic.render.camera import Camera
from atlasic.render.colors import ColorModel
from atlasic.render.commands import (
    Arrow,
    Circle,
    Frame,
    FrameStats,
    Line,
    Polyline,
    Square,
    Text,
)

NODE_RADIUS = 8.0
FOCUS_RADIUS = 12.0
CULL_PADDING = 50.0
ARROW_SIZE = 8.0
LABEL_OFFSET = 14.0
SQUARE_SIZE = 4.0

LINK_COLOR = "rgba(153, 153, 153, 0.6)"
FAINT_LINK_COLOR = "rgba(153, 153, 153, 0.3)"
HIGHLIGHT_COLOR = "#61dafb"
HIGHLIGHT_SHADOW = "rgba(97, 218, 251, 0.8)"
HOVER_SHADOW = "rgba(255, 255, 255, 0.5)"
NODE_STROKE = "#fff"
LABEL_COLOR = "#fff"


@dataclass
class RenderState:
    """Interaction state the renderer reads."""

    highlighted: Optional[int] = None
    hovered: Optional[int] = None
    highlighted_edges: set[int] = field(default_factory=set)


@dataclass(frozen=True)
class DetailLevel:
    show_labels: bool
    show_arrows: bool
    simplified_nodes: bool

    @classmethod
    def for_view(cls, k: float, tier: SizeTier) -> "DetailLevel":
        massive = tier is SizeTier.MASSIVE
        return cls(
            show_labels=k > 0.3 and (not massive or k > 1),
            show_arrows=k > 0.2 and not massive,
            simplified_nodes=massive and k < 0.5,
        )


def _segment_visible(sx: float, sy: float, tx: float, ty: float, b: Rect) -> bool:
    return not (
        (sx < b.x and tx < b.x)
        or (sx > b.right and tx > b.right)
        or (sy < b.y and ty < b.y)
        or (sy > b.bottom and ty > b.bottom)
    )


class Renderer:
    """Builds frames for one :class:`LayoutGraph`.

    Args:
        graph: Arena to draw.
        params: Size-tier parameters (tier and per-frame edge ceiling).
        colors: Node colour model.
    """

    def __init__(
        self,
        graph: LayoutGraph,
        params: SimulationParams,
        colors: ColorModel,
    ) -> None:
        self.graph = graph
        self.params = params
        self.colors = colors

    def render(
        self,
        camera: Camera,
        width: float,
        height: float,
        state: RenderState | None = None,
    ) -> Frame:
        state = state or RenderState()
        k = camera.k
        bounds = camera.visible_bounds(width, height, CULL_PADDING / k)
        detail = DetailLevel.for_view(k, self.params.tier)
        frame = Frame(
            width=width,
            height=height,
            transform=camera.transform,
            stats=FrameStats(
                show_labels=detail.show_labels,
                show_arrows=detail.show_arrows,
                simplified_nodes=detail.simplified_nodes,
            ),
        )

        if self.params.tier is SizeTier.MASSIVE and state.highlighted is None:
            self._draw_links_batched(frame, bounds, k)
        else:
            self._draw_links(frame, bounds, k, detail, state)

        visible = [n for n in self.graph.nodes if bounds.contains(n.x, n.y)]
        if detail.simplified_nodes:
            self._draw_squares(frame, visible)
        else:
            self._draw_circles(frame, visible, k, state)

        if detail.show_labels:
            size = max(10.0, 10.0 / k)
            for node in visible:
                frame.commands.append(
                    Text(node.x, node.y + LABEL_OFFSET, node.label, LABEL_COLOR, size)
                )
            frame.stats.labels_drawn = len(visible)
        return frame

    def _draw_links_batched(self, frame: Frame, bounds: Rect, k: float) -> None:
        nodes = self.graph.nodes
        ceiling = self.params.max_links_per_frame
        segments: list[tuple[float, float, float, float]] = []
        for edge in self.graph.edges:
            if len(segments) >= ceiling:
                break
            s = nodes[edge.source]
            t = nodes[edge.target]
            if _segment_visible(s.x, s.y, t.x, t.y, bounds):
                segments.append((s.x, s.y, t.x, t.y))
        if segments:
            frame.commands.append(Polyline(segments, FAINT_LINK_COLOR, max(0.5, 1 / k)))
        frame.stats.links_drawn = len(segments)

    def _draw_links(
        self,
        frame: Frame,
        bounds: Rect,
        k: float,
        detail: DetailLevel,
        state: RenderState,
    ) -> None:
        nodes = self.graph.nodes
        ceiling = self.params.max_links_per_frame
        line_width = max(0.5, 1 / k)
        arrow_size = ARROW_SIZE / k
        pad = NODE_RADIUS + 2
        drawn = 0

        for i, edge in enumerate(self.graph.edges):
            if drawn >= ceiling:
                break
            s = nodes[edge.source]
            t = nodes[edge.target]
            if not _segment_visible(s.x, s.y, t.x, t.y, bounds):
                continue

            highlighted = i in state.highlighted_edges
            color = HIGHLIGHT_COLOR if highlighted else LINK_COLOR
            dx = t.x - s.x
            dy = t.y - s.y
            dist = math.sqrt(dx * dx + dy * dy) or 1.0
            ex = t.x - dx / dist * pad
            ey = t.y - dy / dist * pad
            frame.commands.append(Line(s.x, s.y, ex, ey, color, line_width))
            drawn += 1

            if detail.show_arrows or highlighted:
                angle = math.atan2(dy, dx)
                left = angle - math.pi / 6
                right = angle + math.pi / 6
                frame.commands.append(
                    Arrow(
                        (
                            (ex, ey),
                            (ex - arrow_size * math.cos(left), ey - arrow_size * math.sin(left)),
                            (ex - arrow_size * math.cos(right), ey - arrow_size * math.sin(right)),
                        ),
                        color,
                    )
                )
        frame.stats.links_drawn = drawn

    def _draw_squares(self, frame: Frame, visible: list[LayoutNode]) -> None:
        half = SQUARE_SIZE / 2
        for node in visible:
            frame.commands.append(
                Square(node.x - half, node.y - half, SQUARE_SIZE, self.colors.color(node))
            )
        frame.stats.nodes_drawn = len(visible)

    def _draw_circles(
        self,
        frame: Frame,
        visible: list[LayoutNode],
        k: float,
        state: RenderState,
    ) -> None:
        for node in visible:
            highlighted = node.index == state.highlighted
            hovered = node.index == state.hovered
            shadow, blur = None, 0.0
            if highlighted:
                shadow, blur = HIGHLIGHT_SHADOW, 12 / k
            elif hovered:
                shadow, blur = HOVER_SHADOW, 8 / k
            frame.commands.append(
                Circle(
                    x=node.x,
                    y=node.y,
                    r=FOCUS_RADIUS if highlighted or hovered else NODE_RADIUS,
                    fill=self.colors.color(node),
                    stroke=HIGHLIGHT_COLOR if highlighted else NODE_STROKE,
                    stroke_width=(3 if highlighted else 1.5) / k,
                    shadow_color=shadow,
                    shadow_blur=blur,
                )
            )
        frame.stats.nodes_drawn = len(visible)

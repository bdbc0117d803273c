"""Node colouring: category palette, in-degree heat and external heat."""

from __future__ import annotations

import enum

from atlasic.layout.arena import LayoutNode
from atlasic.models.graph import NodeCategory

CATEGORY_COLORS: dict[str, str] = {
    NodeCategory.COMPONENT.value: "#61dafb",
    NodeCategory.UTILITY.value: "#ffd700",
    NodeCategory.API.value: "#ff6b6b",
    NodeCategory.TEST.value: "#4ecdc4",
    NodeCategory.CONFIG.value: "#95a5a6",
    NodeCategory.MODEL.value: "#9b59b6",
    NodeCategory.OTHER.value: "#95a5a6",
}

# Heat colours never use the darkest end of the ramp.
HEAT_FLOOR = 0.15


class ColorMode(str, enum.Enum):
    TYPES = "types"
    IN_DEGREE = "indegree"
    GIT = "git"


def _channel(value: float) -> int:
    return max(0, min(255, round(value)))


def turbo_colormap(t: float) -> str:
    """Polynomial approximation of the Turbo colormap, ``t`` in ``[0, 1]``."""
    t = max(0.0, min(1.0, t))
    r = 34.61 + t * (1172.33 - t * (10793.56 - t * (33300.12 - t * (38394.49 - t * 14825.05))))
    g = 23.31 + t * (557.33 + t * (1225.33 - t * (3574.96 - t * (1073.77 + t * 707.56))))
    b = 27.2 + t * (3211.1 - t * (15327.97 - t * (27814 - t * (22569.18 - t * 6838.66))))
    return f"rgb({_channel(r)},{_channel(g)},{_channel(b)})"


def heat_color(value: float, max_value: float) -> str:
    t = value / max_value if max_value > 0 else 0.0
    return turbo_colormap(HEAT_FLOOR + (1 - HEAT_FLOOR) * t)


class ColorModel:
    """Maps a node to its fill colour under the current mode.

    Args:
        max_in_degree: Normaliser for :attr:`ColorMode.IN_DEGREE`.
        mode: Initial colour mode.
    """

    def __init__(self, max_in_degree: int = 1, mode: ColorMode = ColorMode.TYPES) -> None:
        self.mode = mode
        self.max_in_degree = max(1, max_in_degree)
        self.max_heat = 0.0

    def color(self, node: LayoutNode) -> str:
        if self.mode is ColorMode.IN_DEGREE:
            return heat_color(node.in_degree, self.max_in_degree)
        if self.mode is ColorMode.GIT:
            return heat_color(node.heat, self.max_heat)
        return CATEGORY_COLORS.get(node.category, CATEGORY_COLORS[NodeCategory.OTHER.value])

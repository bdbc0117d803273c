"""Backend-neutral draw commands produced by the renderer.

A frame is an ordered list of these records in world coordinates plus the
camera transform; any canvas-like surface can replay it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union


@dataclass
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float
    kind: str = field(default="line", init=False)


@dataclass
class Polyline:
    """Many unconnected segments stroked in one call."""

    segments: list[tuple[float, float, float, float]]
    color: str
    width: float
    kind: str = field(default="polyline", init=False)


@dataclass
class Arrow:
    """Filled triangle: tip followed by the two barb points."""

    points: tuple[tuple[float, float], tuple[float, float], tuple[float, float]]
    color: str
    kind: str = field(default="arrow", init=False)


@dataclass
class Circle:
    x: float
    y: float
    r: float
    fill: str
    stroke: str
    stroke_width: float
    shadow_color: Optional[str] = None
    shadow_blur: float = 0.0
    kind: str = field(default="circle", init=False)


@dataclass
class Square:
    x: float
    y: float
    size: float
    fill: str
    kind: str = field(default="square", init=False)


@dataclass
class Text:
    x: float
    y: float
    text: str
    color: str
    size: float
    kind: str = field(default="text", init=False)


DrawCommand = Union[Line, Polyline, Arrow, Circle, Square, Text]


@dataclass
class Transform:
    """Camera transform: ``screen = world * k + (x, y)``."""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0


@dataclass
class FrameStats:
    nodes_drawn: int = 0
    links_drawn: int = 0
    labels_drawn: int = 0
    show_labels: bool = False
    show_arrows: bool = False
    simplified_nodes: bool = False


@dataclass
class Frame:
    """Everything needed to paint one frame."""

    width: float
    height: float
    transform: Transform
    commands: list[DrawCommand] = field(default_factory=list)
    stats: FrameStats = field(default_factory=FrameStats)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

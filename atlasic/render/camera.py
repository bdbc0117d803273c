"""Pan/zoom camera with an eased zoom-to-node animation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from atlasic.layout.quadtree import Rect
from atlasic.render.commands import Transform

MIN_SCALE = 0.1
MAX_SCALE = 10.0
WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9
FOCUS_SCALE = 2.0
FOCUS_DURATION_MS = 750.0


def ease_out_quad(t: float) -> float:
    return t * (2 - t)


@dataclass
class _Animation:
    start: Transform
    end: Transform
    started_at: float
    duration: float


class Camera:
    """World/screen transform plus an optional in-flight animation.

    Times are milliseconds from any monotonic clock; the caller passes
    them in so frames stay deterministic.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0, k: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.k = k
        self._animation: Optional[_Animation] = None

    @property
    def transform(self) -> Transform:
        return Transform(self.x, self.y, self.k)

    @property
    def animating(self) -> bool:
        return self._animation is not None

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        return wx * self.k + self.x, wy * self.k + self.y

    def visible_bounds(self, width: float, height: float, padding: float = 0.0) -> Rect:
        """World-space rectangle covered by the screen, grown by *padding*."""
        x1, y1 = self.screen_to_world(0, 0)
        x2, y2 = self.screen_to_world(width, height)
        return Rect(x1, y1, x2 - x1, y2 - y1).expanded(padding)

    def pan(self, dx: float, dy: float) -> None:
        self._animation = None
        self.x += dx
        self.y += dy

    def zoom_at(self, sx: float, sy: float, delta_y: float) -> None:
        """Wheel zoom anchored at screen point ``(sx, sy)``."""
        self._animation = None
        factor = WHEEL_ZOOM_IN if delta_y < 0 else WHEEL_ZOOM_OUT
        new_k = max(MIN_SCALE, min(MAX_SCALE, self.k * factor))
        ratio = new_k / self.k
        self.x = sx - (sx - self.x) * ratio
        self.y = sy - (sy - self.y) * ratio
        self.k = new_k

    def focus(
        self,
        wx: float,
        wy: float,
        width: float,
        height: float,
        now: float,
        scale: float = FOCUS_SCALE,
        duration: float = FOCUS_DURATION_MS,
    ) -> None:
        """Start animating so world point ``(wx, wy)`` ends up centred."""
        end = Transform(width / 2 - wx * scale, height / 2 - wy * scale, scale)
        self._animation = _Animation(self.transform, end, now, duration)

    def step(self, now: float) -> bool:
        """Advance the animation to *now*; returns ``True`` if it moved."""
        anim = self._animation
        if anim is None:
            return False
        t = 1.0 if anim.duration <= 0 else min(1.0, (now - anim.started_at) / anim.duration)
        ease = ease_out_quad(max(0.0, t))
        self.k = anim.start.k + (anim.end.k - anim.start.k) * ease
        self.x = anim.start.x + (anim.end.x - anim.start.x) * ease
        self.y = anim.start.y + (anim.end.y - anim.start.y) * ease
        if t >= 1.0:
            self._animation = None
        return True

"""Quads: the four-cornered primitives that drawing submits."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple

Vec2 = Tuple[float, float]
Vec4 = Tuple[float, float, float, float]


class QuadType(enum.Enum):
    """How the renderer shades a quad."""

    REGULAR = enum.auto()
    TEXT = enum.auto()
    CIRCLE = enum.auto()


class FilterMode(enum.Enum):
    """Image sampling filter."""

    NEAREST = enum.auto()
    LINEAR = enum.auto()


def _c_round(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


@dataclass
class DrawQuad:
    """A quad with corners, colour, optional image and render settings.

    Once submitted to a frame, the corners are in normalised device space.
    """

    bottom_left: Vec2 = (0.0, 0.0)
    top_left: Vec2 = (0.0, 0.0)
    top_right: Vec2 = (0.0, 0.0)
    bottom_right: Vec2 = (0.0, 0.0)
    color: Vec4 = (0.0, 0.0, 0.0, 0.0)
    image: Optional[Any] = None
    image_min_filter: FilterMode = FilterMode.NEAREST
    image_mag_filter: FilterMode = FilterMode.NEAREST
    z: int = 0
    type: QuadType = QuadType.REGULAR
    has_scissor: bool = False
    uv: Vec4 = (0.0, 0.0, 0.0, 0.0)
    scissor: Vec4 = (0.0, 0.0, 0.0, 0.0)
    userdata: List[Vec4] = field(default_factory=list)

    @property
    def corners(self) -> Tuple[Vec2, Vec2, Vec2, Vec2]:
        return (self.bottom_left, self.top_left, self.top_right, self.bottom_right)

    def is_offscreen(self) -> bool:
        """Whether all four corners lie beyond one edge of clip space."""
        xs = [c[0] for c in self.corners]
        ys = [c[1] for c in self.corners]
        return (
            all(x < -1 for x in xs)
            or all(x > 1 for x in xs)
            or all(y < -1 for y in ys)
            or all(y > 1 for y in ys)
        )

    def snapped(self, window_width: int, window_height: int) -> "DrawQuad":
        """Return a copy with corners snapped to the window's pixel grid."""
        if window_width <= 0 or window_height <= 0:
            raise ValueError("window size must be positive")
        pixel_width = 2.0 / window_width
        pixel_height = 2.0 / window_height

        def snap(corner: Vec2) -> Vec2:
            x, y = corner
            return (
                _c_round(x / pixel_width) * pixel_width,
                _c_round(y / pixel_height) * pixel_height,
            )

        return replace(
            self,
            bottom_left=snap(self.bottom_left),
            top_left=snap(self.top_left),
            top_right=snap(self.top_right),
            bottom_right=snap(self.bottom_right),
            userdata=list(self.userdata),
        )


def rect_quad(position: Vec2, size: Vec2, color: Vec4, quad_type: QuadType = QuadType.REGULAR) -> DrawQuad:
    """A quad whose bottom-left corner is at position."""
    left, bottom = position
    right = left + size[0]
    top = bottom + size[1]
    return DrawQuad(
        bottom_left=(left, bottom),
        top_left=(left, top),
        top_right=(right, top),
        bottom_right=(right, bottom),
        color=tuple(color),
        type=quad_type,
    )


def sized_quad(size: Vec2, color: Vec4, quad_type: QuadType = QuadType.REGULAR) -> DrawQuad:
    """A quad of the given size with its bottom-left corner at the origin."""
    return rect_quad((0.0, 0.0), size, color, quad_type)
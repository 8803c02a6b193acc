"""Draw frames: collect projected quads with z layers and scissors."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, List, Optional, Sequence

import numpy as np

from ogbengine.quad import DrawQuad, FilterMode, QuadType, Vec2, Vec4, rect_quad, sized_quad
from ogbengine.transform import (
    identity,
    orthographic_projection,
    rotation_z,
    transform_point,
    translation,
)

log = logging.getLogger(__name__)

MAX_Z_BITS = 21
MAX_Z = (1 << MAX_Z_BITS) // 2
Z_STACK_MAX = 4096
SCISSOR_STACK_MAX = 4096
MAX_BOUND_IMAGES = 16


class DrawFrame:
    """A list of quads in normalised device space for one window."""

    def __init__(self, window_width: int, window_height: int) -> None:
        if window_width <= 0 or window_height <= 0:
            raise ValueError("window size must be positive")
        self.window_width = window_width
        self.window_height = window_height
        self.quads: List[DrawQuad] = []
        self.reset()

    def reset(self) -> None:
        """Clear quads and stacks and restore the default projection and camera."""
        self.quads.clear()
        half_w = self.window_width // 2
        half_h = self.window_height // 2
        self.projection = orthographic_projection(-half_w, half_w, -half_h, half_h, -1, 10)
        self.camera_xform = identity()
        self.cbuffer: Any = None
        self.shader_extension: Any = None
        self.enable_z_sorting = False
        self._z_stack: List[int] = []
        self._scissor_stack: List[Vec4] = []
        self.bound_images: List[Any] = [None] * MAX_BOUND_IMAGES
        self.highest_bound_slot_index = -1

    def bind_image(self, image: Any, slot_index: int) -> None:
        """Bind image to a shader slot."""
        if not 0 <= slot_index < MAX_BOUND_IMAGES:
            raise IndexError(
                f"The highest bind image slot is {MAX_BOUND_IMAGES - 1}, you tried to bind to {slot_index}"
            )
        self.bound_images[slot_index] = image
        self.highest_bound_slot_index = max(slot_index, self.highest_bound_slot_index)

    def draw_quad_projected(self, quad: DrawQuad, world_to_clip) -> Optional[DrawQuad]:
        """Project quad to clip space and add it; None if it is culled."""
        bl, tl, tr, br = (transform_point(world_to_clip, x, y) for x, y in quad.corners)
        projected = replace(
            quad, bottom_left=bl, top_left=tl, top_right=tr, bottom_right=br, userdata=[]
        )
        if projected.is_offscreen():
            return None
        projected.image_min_filter = FilterMode.NEAREST
        projected.image_mag_filter = FilterMode.NEAREST
        projected.z = self._z_stack[-1] if self._z_stack else 0
        projected.has_scissor = bool(self._scissor_stack)
        if self._scissor_stack:
            projected.scissor = self._scissor_stack[-1]
        # Snapping avoids sampling artifacts from large atlases.
        submitted = projected.snapped(self.window_width, self.window_height)
        self.quads.append(submitted)
        return submitted

    def _world_to_clip(self) -> np.ndarray:
        return self.projection @ np.linalg.inv(self.camera_xform)

    def draw_quad(self, quad: DrawQuad) -> Optional[DrawQuad]:
        """Add a quad given in world coordinates."""
        return self.draw_quad_projected(quad, self._world_to_clip())

    def draw_quad_xform(self, quad: DrawQuad, xform) -> Optional[DrawQuad]:
        """Add a quad transformed by xform into world coordinates."""
        return self.draw_quad_projected(quad, self._world_to_clip() @ np.asarray(xform, dtype=np.float64))

    def draw_rect(self, position: Vec2, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self.draw_quad(rect_quad(position, size, color, QuadType.REGULAR))

    def draw_rect_xform(self, xform, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self.draw_quad_xform(sized_quad(size, color, QuadType.REGULAR), xform)

    def draw_circle(self, position: Vec2, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self.draw_quad(rect_quad(position, size, color, QuadType.CIRCLE))

    def draw_circle_xform(self, xform, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self.draw_quad_xform(sized_quad(size, color, QuadType.CIRCLE), xform)

    @staticmethod
    def _with_image(quad: Optional[DrawQuad], image: Any) -> Optional[DrawQuad]:
        if quad is not None:
            quad.image = image
            quad.uv = (0.0, 0.0, 1.0, 1.0)
        return quad

    def draw_image(self, image: Any, position: Vec2, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self._with_image(self.draw_rect(position, size, color), image)

    def draw_image_xform(self, image: Any, xform, size: Vec2, color: Vec4) -> Optional[DrawQuad]:
        return self._with_image(self.draw_rect_xform(xform, size, color), image)

    def draw_line(self, p0: Vec2, p1: Vec2, line_width: float, color: Vec4) -> Optional[DrawQuad]:
        """Draw a rectangle of line_width running from p0 to p1."""
        dx, dy = p1[0] - p0[0], p1[1] - p0[1]
        length = math.hypot(dx, dy)
        angle = math.atan2(dy, dx)
        xform = (
            translation(p0[0], p0[1], 0)
            @ rotation_z(angle)
            @ translation(0, -line_width / 2, 0)
        )
        return self.draw_rect_xform(xform, (length, line_width), color)

    def push_z_layer(self, z: int) -> None:
        if len(self._z_stack) >= Z_STACK_MAX:
            raise OverflowError("Too many z layers pushed. Pop with pop_z_layer() when done.")
        self._z_stack.append(z)

    def pop_z_layer(self) -> None:
        if not self._z_stack:
            raise IndexError("No Z layers to pop!")
        self._z_stack.pop()

    def push_window_scissor(self, minimum: Sequence[float], maximum: Sequence[float]) -> None:
        if len(self._scissor_stack) >= SCISSOR_STACK_MAX:
            raise OverflowError("Too many scissors pushed. Pop with pop_window_scissor() when done.")
        self._scissor_stack.append((minimum[0], minimum[1], maximum[0], maximum[1]))

    def pop_window_scissor(self) -> None:
        if not self._scissor_stack:
            raise IndexError("No scissors to pop!")
        self._scissor_stack.pop()
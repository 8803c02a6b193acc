"""4x4 transformation matrices for column vectors (apply with matrix @ vector)."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np


def identity() -> np.ndarray:
    """Return the 4x4 identity matrix."""
    return np.eye(4, dtype=np.float64)


def orthographic_projection(left, right, bottom, top, near, far) -> np.ndarray:
    """Map the box [left,right]x[bottom,top]x[near,far] onto clip space [-1,1]."""
    if right == left or top == bottom or far == near:
        raise ValueError("projection volume must not be empty")
    m = identity()
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def translation(x, y, z) -> np.ndarray:
    """Return a matrix that moves points by (x, y, z)."""
    m = identity()
    m[:3, 3] = (x, y, z)
    return m


def rotation_z(radians) -> np.ndarray:
    """Return a counter-clockwise rotation about the z axis."""
    c, s = math.cos(radians), math.sin(radians)
    m = identity()
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


def scaling(x, y, z) -> np.ndarray:
    """Return a matrix that scales each axis."""
    return np.diag((float(x), float(y), float(z), 1.0))


def transform_point(matrix, x, y) -> Tuple[float, float]:
    """Transform the point (x, y, 0, 1) and return its x and y."""
    result = np.asarray(matrix, dtype=np.float64) @ np.array((x, y, 0.0, 1.0))
    return float(result[0]), float(result[1])
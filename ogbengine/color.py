"""Colour conversion helpers."""

from __future__ import annotations

from typing import Tuple

Color = Tuple[float, float, float, float]


def hex_to_rgba(value: int) -> Color:
    """Turn 0xRRGGBBAA into a normalised (r, g, b, a) tuple."""
    r = (value >> 24) & 0xFF
    g = (value >> 16) & 0xFF
    b = (value >> 8) & 0xFF
    a = value & 0xFF
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)
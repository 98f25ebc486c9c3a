# shooter/utils/helpers.py
"""Utility functions and helpers."""

import math
from typing import NamedTuple


class Rect(NamedTuple):
    x: float
    y: float
    w: float
    h: float


def calculate_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b by factor t."""
    return a + (b - a) * t


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Check if two axis-aligned rectangles overlap (touching edges do not count)."""
    return a.x < b.x + b.w and a.x + a.w > b.x and a.y < b.y + b.h and a.y + a.h > b.y


def inside_open_rect(x: float, y: float, width: float, height: float) -> bool:
    """True if (x, y) lies strictly inside the rectangle anchored at the origin."""
    return 0 < x < width and 0 < y < height

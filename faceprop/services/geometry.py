"""
Landmark geometry helpers.
Pure functions over 2D points; every ratio in the metric engine builds on these.
"""

import numpy as np

from faceprop.models.domain.landmarks import Point


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(np.array([a.x - b.x, a.y - b.y], dtype=np.float64)))


def midpoint(a: Point, b: Point) -> Point:
    """Arithmetic mean of two points."""
    return Point(x=(a.x + b.x) / 2.0, y=(a.y + b.y) / 2.0)


def safe_divide(numerator: float, denominator: float, fallback: float = 1.0) -> float:
    """
    Divide, substituting `fallback` for an exactly-zero denominator.

    Used for secondary segments (vertical spans, symmetry) where a zero
    length means the ratio collapses to the numerator itself.
    """
    if denominator == 0:
        return numerator / fallback
    return numerator / denominator


def vertical_span(a: float, b: float) -> float:
    """Length of the vertical segment between two y coordinates."""
    return abs(b - a)

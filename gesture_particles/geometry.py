"""Geometry helpers over hand landmark points."""

import math
from typing import Sequence, Tuple, List

Point = Sequence[float]  # (x, y) or (x, y, z), normalized camera space
Point2 = Tuple[float, float]


def landmark_distance(point1: Point, point2: Point) -> float:
    """Euclidean distance between two points, in the space they were given in.

    >>> landmark_distance((0, 0), (3, 4))
    5.0
    >>> landmark_distance((1, 2, 3), (1, 2, 3))
    0.0
    """
    return math.dist(point1, point2)


def planar(point: Point) -> Point2:
    """The (x, y) image-plane projection of a landmark."""
    return (point[0], point[1])


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value to range [lo, hi]."""
    return max(lo, min(hi, v))


def scale_about(points: Sequence[Point], origin: Point, k: float) -> List[tuple]:
    """Scale every point's offset from `origin` by `k`.

    >>> scale_about([(1, 1), (2, 3)], (1, 1), 2)
    [(1, 1), (3, 5)]
    """
    return [
        tuple(o + k * (c - o) for c, o in zip(point, origin)) for point in points
    ]

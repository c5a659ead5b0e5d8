from __future__ import annotations

from enum import Enum
from typing import Iterator, Sequence, Tuple

from shapefix.geometry.primitives import Point2D


Edge = Tuple[Point2D, Point2D]


class Orientation(Enum):
    COLLINEAR = 0
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = 2


def cross_value(p: Point2D, q: Point2D, r: Point2D) -> int:
    # Python ints are unbounded, so products of coordinate differences are exact.
    return (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)


def orientation(p: Point2D, q: Point2D, r: Point2D) -> Orientation:
    """
    Rotational sense of the triple (p, q, r).

    Positive cross value is CLOCKWISE, negative is COUNTER_CLOCKWISE. The sign
    convention is shared by every caller in the package.
    """
    val = cross_value(p, q, r)
    if val == 0:
        return Orientation.COLLINEAR
    return Orientation.CLOCKWISE if val > 0 else Orientation.COUNTER_CLOCKWISE


def on_segment(p: Point2D, q: Point2D, r: Point2D) -> bool:
    """True if r, assumed collinear with p and q, lies in the closed box of pq."""
    return min(p.x, q.x) <= r.x <= max(p.x, q.x) and min(p.y, q.y) <= r.y <= max(p.y, q.y)


def segments_intersect(p1: Point2D, p2: Point2D, q1: Point2D, q2: Point2D) -> bool:
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True

    # collinear touching / overlap
    if o1 == Orientation.COLLINEAR and on_segment(p1, p2, q1):
        return True
    if o2 == Orientation.COLLINEAR and on_segment(p1, p2, q2):
        return True
    if o3 == Orientation.COLLINEAR and on_segment(q1, q2, p1):
        return True
    if o4 == Orientation.COLLINEAR and on_segment(q1, q2, p2):
        return True
    return False


def signed_area(points: Sequence[Point2D]) -> int:
    """
    Shoelace sum over consecutive pairs of a closed ring.

    Returns twice the signed area so the result stays an exact integer. The
    ring is not wrapped implicitly: callers pass it closed.
    """
    return sum(a.x * b.y - b.x * a.y for a, b in edges(points))


def squared_distance(p: Point2D, q: Point2D) -> int:
    dx = p.x - q.x
    dy = p.y - q.y
    return dx * dx + dy * dy


def edges(points: Sequence[Point2D]) -> Iterator[Edge]:
    for i in range(len(points) - 1):
        yield points[i], points[i + 1]

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List

from shapefix.geometry.kernel import Orientation, orientation, squared_distance
from shapefix.geometry.primitives import Point2D, Shape2D


def _pivot(points: List[Point2D]) -> Point2D:
    p0 = points[0]
    for p in points:
        if p.y < p0.y or (p.y == p0.y and p.x < p0.x):
            p0 = p
    return p0


def convex_hull(points: Iterable[Point2D]) -> List[Point2D]:
    """
    Graham's scan. Returns the open hull ring in counter-clockwise order.

    Inputs of one point or fewer come back unchanged. The caller's iterable
    is not modified.
    """
    pts = list(points)
    if len(pts) <= 1:
        return pts

    p0 = _pivot(pts)

    def _polar_cmp(a: Point2D, b: Point2D) -> int:
        if a == b:
            return 0
        if a == p0:
            return -1
        if b == p0:
            return 1
        o = orientation(p0, a, b)
        if o == Orientation.COLLINEAR:
            da = squared_distance(p0, a)
            db = squared_distance(p0, b)
            return (da > db) - (da < db)
        return -1 if o == Orientation.COUNTER_CLOCKWISE else 1

    ordered = sorted(pts, key=cmp_to_key(_polar_cmp))

    stack: List[Point2D] = [ordered[0], ordered[1]]
    for p in ordered[2:]:
        while len(stack) >= 2 and orientation(stack[-2], stack[-1], p) != Orientation.COUNTER_CLOCKWISE:
            stack.pop()
        stack.append(p)
    return stack


def closed_hull(points: Iterable[Point2D]) -> Shape2D:
    hull = convex_hull(points)
    if len(hull) < 3:
        return Shape2D.empty()
    if hull[0] != hull[-1]:
        hull.append(hull[0])
    return Shape2D(hull)

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from shapefix.geometry.kernel import segments_intersect, signed_area
from shapefix.geometry.primitives import Point2D, Shape2D


InvalidReason = Literal[
    "too_few_points",
    "not_closed",
    "duplicate_points",
    "self_intersection",
    "zero_area",
]
EdgePair = Tuple[int, int]

MIN_RING_POINTS = 4


@dataclass(frozen=True)
class ShapeValidityReport:
    valid: bool
    point_count: int
    reason: Optional[InvalidReason] = None
    intersecting_edges: Optional[EdgePair] = None
    signed_area: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "valid": bool(self.valid),
            "point_count": int(self.point_count),
            "reason": self.reason,
            "intersecting_edges": list(self.intersecting_edges) if self.intersecting_edges is not None else None,
            "signed_area": self.signed_area,
        }


def has_incidental_duplicates(points: Sequence[Point2D]) -> bool:
    """Repeated points among everything but the closing point."""
    interior = points[:-1]
    return len(set(interior)) != len(interior)


def _skip_edge_pair(i: int, j: int, edge_count: int) -> bool:
    # adjacent edges and the first/last pair share a vertex by construction
    return j - i <= 1 or (i == 0 and j == edge_count - 1)


def find_intersecting_edges(points: Sequence[Point2D], *, first_only: bool = True) -> List[EdgePair]:
    """
    Index pairs (i, j), i < j, of non-adjacent ring edges that intersect.

    Edge k runs from points[k] to points[k + 1]. Pairs come back in scan
    order; with first_only the scan stops at the first hit.
    """
    edge_count = len(points) - 1
    hits: List[EdgePair] = []
    for i in range(edge_count):
        a1, a2 = points[i], points[i + 1]
        for j in range(i + 1, edge_count):
            if _skip_edge_pair(i, j, edge_count):
                continue
            if segments_intersect(a1, a2, points[j], points[j + 1]):
                hits.append((i, j))
                if first_only:
                    return hits
    return hits


def validate_shape(shape: Shape2D | Sequence[Point2D]) -> ShapeValidityReport:
    """
    Run the validity checks cheapest-first and report the first failure.

    Order: point count, closure, incidental duplicates, self-intersection
    (O(n^2) edge pairs), then non-zero Shoelace area.
    """
    points = shape.points if isinstance(shape, Shape2D) else tuple(shape)
    n = len(points)

    if n < MIN_RING_POINTS:
        return ShapeValidityReport(valid=False, point_count=n, reason="too_few_points")
    if points[0] != points[-1]:
        return ShapeValidityReport(valid=False, point_count=n, reason="not_closed")
    if has_incidental_duplicates(points):
        return ShapeValidityReport(valid=False, point_count=n, reason="duplicate_points")

    hits = find_intersecting_edges(points)
    if hits:
        return ShapeValidityReport(valid=False, point_count=n, reason="self_intersection", intersecting_edges=hits[0])

    area = signed_area(points)
    if area == 0:
        return ShapeValidityReport(valid=False, point_count=n, reason="zero_area", signed_area=0)
    return ShapeValidityReport(valid=True, point_count=n, signed_area=area)


def is_valid(shape: Shape2D | Sequence[Point2D]) -> bool:
    return validate_shape(shape).valid


def assert_valid_shape(shape: Shape2D) -> None:
    report = validate_shape(shape)
    if not report.valid:
        raise ValueError(
            "Invalid shape: "
            f"reason={report.reason}, "
            f"point_count={report.point_count}, "
            f"intersecting_edges={report.intersecting_edges}"
        )

"""
Shapefix Geometry Module

Integer polygon primitives, the orientation/intersection kernel, convex hull
construction, the validity predicate and the repair pipeline.
"""

from shapefix.geometry.primitives import Point2D, Shape2D, ShapeInputError
from shapefix.geometry.kernel import (
    Orientation,
    on_segment,
    orientation,
    segments_intersect,
    signed_area,
    squared_distance,
)
from shapefix.geometry.hull import closed_hull, convex_hull
from shapefix.geometry.validity import ShapeValidityReport, is_valid, validate_shape
from shapefix.geometry.policy import DEFAULT_REPAIR_POLICY, RepairPolicy
from shapefix.geometry.repair import repair, repair_shape

__all__ = [
    "Point2D",
    "Shape2D",
    "ShapeInputError",
    "Orientation",
    "on_segment",
    "orientation",
    "segments_intersect",
    "signed_area",
    "squared_distance",
    "closed_hull",
    "convex_hull",
    "ShapeValidityReport",
    "is_valid",
    "validate_shape",
    "DEFAULT_REPAIR_POLICY",
    "RepairPolicy",
    "repair",
    "repair_shape",
]

"""
shapefix: validation and repair of integer-coordinate polygons.

    >>> from shapefix import Shape2D, is_valid, repair
    >>> square = Shape2D.from_coords([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
    >>> is_valid(square)
    True
"""

from shapefix.geometry import (
    DEFAULT_REPAIR_POLICY,
    Point2D,
    RepairPolicy,
    Shape2D,
    ShapeInputError,
    convex_hull,
    is_valid,
    repair,
    repair_shape,
    validate_shape,
)
from shapefix.models import Repaired, Unrepairable

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_REPAIR_POLICY",
    "Point2D",
    "RepairPolicy",
    "Repaired",
    "Shape2D",
    "ShapeInputError",
    "Unrepairable",
    "convex_hull",
    "is_valid",
    "repair",
    "repair_shape",
    "validate_shape",
]

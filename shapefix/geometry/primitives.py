from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, Union, overload

import numpy as np


Coord = Tuple[int, int]


class ShapeInputError(ValueError):
    """Raised when caller-supplied coordinates cannot form a point sequence."""


@dataclass(frozen=True)
class Point2D:
    x: int
    y: int

    def __post_init__(self) -> None:
        # stored as plain Python ints, never fixed-width numpy scalars
        object.__setattr__(self, "x", operator.index(self.x))
        object.__setattr__(self, "y", operator.index(self.y))

    def as_tuple(self) -> Coord:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class Shape2D:
    """
    Ordered point sequence tracing a polygon boundary.

    A closed ring repeats its first point at the end. The empty shape is the
    sentinel for "no polygon" and compares equal to every other empty shape.
    """

    points: Tuple[Point2D, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def empty(cls) -> "Shape2D":
        return cls(())

    @classmethod
    def from_coords(cls, coords: Union[Iterable[Iterable[int]], np.ndarray]) -> "Shape2D":
        if isinstance(coords, np.ndarray):
            if coords.size == 0:
                return cls.empty()
            if coords.ndim != 2 or coords.shape[1] != 2:
                raise ShapeInputError(f"Coordinate array must be Nx2, got shape {coords.shape}")
            if not np.issubdtype(coords.dtype, np.integer):
                raise ShapeInputError(f"Coordinate array must have an integer dtype, got {coords.dtype}")
            return cls(tuple(Point2D(int(x), int(y)) for x, y in coords.tolist()))

        points: List[Point2D] = []
        for i, row in enumerate(coords):
            try:
                pair = tuple(row)
            except TypeError as exc:
                raise ShapeInputError(f"Coordinate {i} must be an (x, y) pair, got {row!r}") from exc
            if len(pair) != 2:
                raise ShapeInputError(f"Coordinate {i} must be an (x, y) pair, got {pair!r}")
            try:
                points.append(Point2D(pair[0], pair[1]))
            except TypeError as exc:
                raise ShapeInputError(f"Coordinate {i} is not integral: {pair!r}") from exc
        return cls(tuple(points))

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def is_closed(self) -> bool:
        return bool(self.points) and self.points[0] == self.points[-1]

    def to_coords(self) -> List[Coord]:
        return [p.as_tuple() for p in self.points]

    def to_array(self) -> np.ndarray:
        return np.asarray(self.to_coords(), dtype=np.int64).reshape(-1, 2)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.points)

    @overload
    def __getitem__(self, idx: int) -> Point2D: ...

    @overload
    def __getitem__(self, idx: slice) -> Tuple[Point2D, ...]: ...

    def __getitem__(self, idx):
        return self.points[idx]

    def __repr__(self) -> str:
        return f"Shape2D(points={list(self.points)})"

"""Point and 3x3 matrix value types."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from perspective_crop.errors import SingularMatrixError

from .linalg import DEFAULT_EPSILON, determinant3, inverse3


@dataclass(frozen=True, slots=True)
class Point2D:
    """A point in source-pixel or output-pixel space."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def coerce(cls, value: Union["Point2D", Sequence[float]]) -> "Point2D":
        if isinstance(value, Point2D):
            return value
        x, y = value
        return cls(x, y)

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point2D":
        return Point2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def cross(self, other: "Point2D") -> float:
        """Z component of the 2D cross product."""
        return self.x * other.y - self.y * other.x

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_homogeneous(self) -> np.ndarray:
        return np.array([self.x, self.y, 1.0], dtype=np.float64)


@dataclass(frozen=True, slots=True, eq=False)
class Matrix3:
    """Immutable 3x3 matrix backed by a read-only float64 array."""

    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64)
        if values.shape != (3, 3):
            raise ValueError(f"Matrix3 requires shape (3, 3), got {values.shape}")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @classmethod
    def identity(cls) -> "Matrix3":
        return cls(np.eye(3))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> "Matrix3":
        return cls(np.array([list(row) for row in rows], dtype=np.float64))

    def __getitem__(self, index):
        return self.values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3):
            return NotImplemented
        return bool(np.array_equal(self.values, other.values))

    def __matmul__(self, other):
        if isinstance(other, Matrix3):
            return Matrix3(self.values @ other.values)
        return self.values @ np.asarray(other, dtype=np.float64)

    def determinant(self) -> float:
        return determinant3(self.values)

    def inverse(self, epsilon: float = DEFAULT_EPSILON) -> "Matrix3":
        return Matrix3(inverse3(self.values, epsilon=epsilon))

    def normalized(self, epsilon: float = DEFAULT_EPSILON) -> "Matrix3":
        """Rescale so that the bottom-right entry equals 1."""
        corner = float(self.values[2, 2])
        if abs(corner) <= epsilon * max(float(np.abs(self.values).max()), 1.0):
            raise SingularMatrixError("Cannot normalise a matrix whose [2][2] entry is zero")
        return Matrix3(self.values / corner)

    def transform_point(self, point: Point2D) -> Point2D:
        """Map a Cartesian point, including the homogeneous divide."""
        x, y, w = self.values @ point.as_homogeneous()
        if w == 0.0:
            return Point2D(math.nan, math.nan)
        return Point2D(x / w, y / w)


__all__ = ["Point2D", "Matrix3"]

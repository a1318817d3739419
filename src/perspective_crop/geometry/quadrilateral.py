"""Four-corner regions in source pixel space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

from perspective_crop.errors import DegenerateGeometryError, WindingOrderError

from .primitives import Point2D

PointLike = Union[Point2D, Sequence[float]]


@dataclass(frozen=True, slots=True)
class Quadrilateral:
    """Ordered corners of the region to rectify.

    Corners are consecutive around the outline. Their order is supplied by the
    caller and is only changed through :meth:`ordered` or :meth:`reversed`.
    """

    corners: Tuple[Point2D, Point2D, Point2D, Point2D]

    def __post_init__(self) -> None:
        corners = tuple(Point2D.coerce(point) for point in self.corners)
        if len(corners) != 4:
            raise ValueError(f"A quadrilateral needs exactly four corners, got {len(corners)}")
        object.__setattr__(self, "corners", corners)

    @classmethod
    def from_points(cls, points: Iterable[PointLike]) -> "Quadrilateral":
        return cls(tuple(points))  # type: ignore[arg-type]

    @classmethod
    def from_rect(cls, width: float, height: float) -> "Quadrilateral":
        """Axis-aligned rectangle from the origin, clockwise from top-left."""
        return cls(
            (
                Point2D(0.0, 0.0),
                Point2D(width, 0.0),
                Point2D(width, height),
                Point2D(0.0, height),
            )
        )

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.corners)

    def __getitem__(self, index: int) -> Point2D:
        return self.corners[index]

    def __len__(self) -> int:
        return 4

    def signed_area(self) -> float:
        """Shoelace area. Positive when the corners run clockwise on screen (y axis down)."""
        total = 0.0
        for i, point in enumerate(self.corners):
            total += point.cross(self.corners[(i + 1) % 4])
        return 0.5 * total

    def area(self) -> float:
        return abs(self.signed_area())

    def is_clockwise(self) -> bool:
        return self.signed_area() > 0.0

    def is_convex(self) -> bool:
        signs = []
        for i in range(4):
            a, b, c = self.corners[i], self.corners[(i + 1) % 4], self.corners[(i + 2) % 4]
            turn = (b - a).cross(c - b)
            if turn != 0.0:
                signs.append(turn > 0.0)
        return bool(signs) and all(sign == signs[0] for sign in signs)

    def reversed(self) -> "Quadrilateral":
        """Same outline traversed the other way, keeping the first corner."""
        first, second, third, fourth = self.corners
        return Quadrilateral((first, fourth, third, second))

    def ordered(self) -> "Quadrilateral":
        """Corners as (top-left, top-right, bottom-right, bottom-left).

        Corners are sorted by angle around their centroid, which runs clockwise
        on screen, and rotated to start at the corner with the smallest
        ``x + y`` (ties go to the smaller ``y``).

        Raises:
            DegenerateGeometryError: If the corners enclose no area.
            WindingOrderError: If no convex clockwise order exists.
        """
        pts = self.as_array()
        centroid = pts.mean(axis=0)
        angles = np.arctan2(pts[:, 1] - centroid[1], pts[:, 0] - centroid[0])
        by_angle = [int(i) for i in np.argsort(angles, kind="stable")]
        start = min(by_angle, key=lambda i: (pts[i, 0] + pts[i, 1], pts[i, 1]))
        offset = by_angle.index(start)
        order = by_angle[offset:] + by_angle[:offset]
        result = Quadrilateral(tuple(self.corners[i] for i in order))  # type: ignore[arg-type]

        if result.area() == 0.0:
            raise DegenerateGeometryError("Corners enclose no area; cannot order them")
        if not result.is_convex() or result.signed_area() <= 0.0:
            raise WindingOrderError("Corners do not form a convex quadrilateral; cannot order them")
        return result

    def translated(self, dx: float, dy: float) -> "Quadrilateral":
        offset = Point2D(dx, dy)
        return Quadrilateral(tuple(point + offset for point in self.corners))  # type: ignore[arg-type]

    def as_array(self) -> np.ndarray:
        """Corners as a float64 array of shape (4, 2)."""
        return np.array([point.as_tuple() for point in self.corners], dtype=np.float64)


__all__ = ["PointLike", "Quadrilateral"]

"""Homography estimation from four point correspondences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np
from loguru import logger

from perspective_crop.errors import DegenerateGeometryError, SingularMatrixError
from perspective_crop.geometry import DEFAULT_EPSILON, Matrix3, Point2D, PointLike, solve


@dataclass(frozen=True, slots=True)
class Homography:
    """Projective map between two planes with the bottom-right entry fixed to 1."""

    matrix: Matrix3

    @classmethod
    def from_array(cls, values: np.ndarray) -> "Homography":
        return cls(Matrix3(values))

    @property
    def values(self) -> np.ndarray:
        return self.matrix.values

    def apply(self, point: PointLike) -> Point2D:
        return self.matrix.transform_point(Point2D.coerce(point))

    def apply_many(self, points: np.ndarray) -> np.ndarray:
        """Map an (N, 2) array of points; rows whose ``w`` is 0 come back as NaN."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        mapped = homogeneous @ self.values.T
        w = mapped[:, 2]
        result = np.full((pts.shape[0], 2), np.nan, dtype=np.float64)
        valid = w != 0.0
        result[valid] = mapped[valid, :2] / w[valid, None]
        return result


def _as_points(points: Iterable[PointLike], role: str) -> List[Point2D]:
    coerced = [Point2D.coerce(point) for point in points]
    if len(coerced) != 4:
        raise ValueError(f"Exactly four {role} points are required, got {len(coerced)}")
    return coerced


def build_dlt_system(source: Sequence[Point2D], dest: Sequence[Point2D]) -> tuple[np.ndarray, np.ndarray]:
    """Assemble the 8x8 system whose solution holds the first eight homography entries."""
    a = np.zeros((8, 8), dtype=np.float64)
    b = np.zeros(8, dtype=np.float64)
    for i, (src, dst) in enumerate(zip(source, dest)):
        x, y = src.x, src.y
        u, v = dst.x, dst.y
        a[2 * i] = [x, y, 1.0, 0.0, 0.0, 0.0, -x * u, -y * u]
        a[2 * i + 1] = [0.0, 0.0, 0.0, x, y, 1.0, -x * v, -y * v]
        b[2 * i] = u
        b[2 * i + 1] = v
    return a, b


class HomographyEstimator:
    """Solves the direct linear transform for exactly four correspondences."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON) -> None:
        self._epsilon = epsilon

    def estimate(self, source_points: Iterable[PointLike], dest_points: Iterable[PointLike]) -> Homography:
        """Compute the homography mapping ``source_points`` onto ``dest_points``.

        Args:
            source_points: Four points, in the same order as ``dest_points``.
            dest_points: Four target points.

        Returns:
            Homography with ``h33 == 1``.

        Raises:
            DegenerateGeometryError: If the points are collinear, coincident or
                otherwise make the linear system singular.
        """
        source = _as_points(source_points, "source")
        dest = _as_points(dest_points, "destination")
        if not all(point.is_finite() for point in source + dest):
            raise DegenerateGeometryError("Correspondences contain non-finite coordinates")

        a, b = build_dlt_system(source, dest)
        try:
            h = solve(a, b, epsilon=self._epsilon)
        except SingularMatrixError as exc:
            logger.warning(f"Rejecting degenerate correspondences {[p.as_tuple() for p in source]}")
            raise DegenerateGeometryError(
                "Corner points are collinear or coincident; cannot estimate a homography"
            ) from exc

        return Homography.from_array(np.append(h, 1.0).reshape(3, 3))


def estimate_homography(
    source_points: Iterable[PointLike],
    dest_points: Iterable[PointLike],
    epsilon: float = DEFAULT_EPSILON,
) -> Homography:
    return HomographyEstimator(epsilon=epsilon).estimate(source_points, dest_points)


__all__ = ["Homography", "HomographyEstimator", "build_dlt_system", "estimate_homography"]

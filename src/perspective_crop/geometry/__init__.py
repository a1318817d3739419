"""Geometric primitives and small linear-algebra helpers."""

from .linalg import DEFAULT_EPSILON, determinant3, inverse3, solve  # noqa: F401
from .primitives import Matrix3, Point2D  # noqa: F401
from .quadrilateral import PointLike, Quadrilateral  # noqa: F401

"""Exceptions raised by the perspective crop engine."""

from __future__ import annotations


class PerspectiveCropError(Exception):
    """Base class for all engine failures."""


class DegenerateGeometryError(PerspectiveCropError):
    """The corner points do not span a plane (collinear or coincident points)."""


class SingularMatrixError(PerspectiveCropError):
    """A homography could not be inverted."""


class InvalidDimensionsError(PerspectiveCropError):
    """Requested output width or height is not a positive integer."""


class WindingOrderError(PerspectiveCropError):
    """Quadrilateral corners are not in the winding order the engine requires."""


class InvalidRasterError(PerspectiveCropError):
    """Pixel buffer does not describe a valid RGBA raster."""

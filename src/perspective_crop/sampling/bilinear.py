"""Bilinear interpolation with edge clamping."""

from __future__ import annotations

import numpy as np

from .base import Sampler, clamp_indices


class BilinearSampler(Sampler):
    """Blends the four pixels around a fractional coordinate.

    With ``x1 = floor(x)``, ``x2 = x1 + 1`` and ``dx = x - x1`` (likewise for
    y), each channel is interpolated along x on both rows and then along y.
    Neighbours falling outside the raster are clamped independently, so a
    coordinate past the right edge repeats the last column.
    """

    name = "bilinear"

    def _interpolate(self, pixels: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        height, width = pixels.shape[:2]
        x1 = np.floor(xs)
        y1 = np.floor(ys)
        dx = (xs - x1)[:, None]
        dy = (ys - y1)[:, None]

        # Clamp in float space first so huge coordinates cannot overflow the int cast.
        x1c, y1c = clamp_indices(x1, y1, width, height)
        x2c, y2c = clamp_indices(x1 + 1, y1 + 1, width, height)
        x1c, y1c, x2c, y2c = (index.astype(np.intp) for index in (x1c, y1c, x2c, y2c))

        q11 = pixels[y1c, x1c].astype(np.float64)
        q21 = pixels[y1c, x2c].astype(np.float64)
        q12 = pixels[y2c, x1c].astype(np.float64)
        q22 = pixels[y2c, x2c].astype(np.float64)

        r1 = q11 * (1.0 - dx) + q21 * dx
        r2 = q12 * (1.0 - dx) + q22 * dx
        return r1 * (1.0 - dy) + r2 * dy


__all__ = ["BilinearSampler"]

"""Truncating nearest-pixel lookup."""

from __future__ import annotations

import numpy as np

from .base import Sampler, clamp_indices


class NearestNeighborSampler(Sampler):
    """Reads the pixel whose cell contains the coordinate, without blending."""

    name = "nearest"

    def _interpolate(self, pixels: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        height, width = pixels.shape[:2]
        xi, yi = clamp_indices(np.floor(xs), np.floor(ys), width, height)
        return pixels[yi.astype(np.intp), xi.astype(np.intp)].astype(np.float64)


__all__ = ["NearestNeighborSampler"]

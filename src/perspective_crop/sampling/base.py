"""Shared interface for raster samplers."""

from __future__ import annotations

import abc
from typing import NamedTuple, Tuple

import numpy as np

from perspective_crop.raster import CHANNELS, RasterImage


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float


TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)


class Sampler(abc.ABC):
    """Reads colours from a raster at fractional coordinates.

    Neighbour lookups outside the raster are clamped to the nearest edge pixel.
    Coordinates that are not finite yield :data:`TRANSPARENT`.
    """

    name: str = ""

    def sample(self, image: RasterImage, x: float, y: float) -> Color:
        values = self.sample_many(image, np.array([x], dtype=np.float64), np.array([y], dtype=np.float64))
        return Color(*(float(channel) for channel in values[0]))

    def sample_many(self, image: RasterImage, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Sample every (xs[i], ys[i]) pair, returning float64 colours of shape (N, 4)."""
        xs = np.asarray(xs, dtype=np.float64).ravel()
        ys = np.asarray(ys, dtype=np.float64).ravel()
        if xs.shape != ys.shape:
            raise ValueError(f"Coordinate arrays differ in length: {xs.shape} vs {ys.shape}")

        result = np.zeros((xs.size, CHANNELS), dtype=np.float64)
        finite = np.isfinite(xs) & np.isfinite(ys)
        if np.any(finite):
            result[finite] = self._interpolate(image.pixels, xs[finite], ys[finite])
        return result

    @abc.abstractmethod
    def _interpolate(self, pixels: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Interpolate finite coordinates; must return an (N, 4) float64 array."""


def clamp_indices(
    xs: np.ndarray, ys: np.ndarray, width: int, height: int
) -> Tuple[np.ndarray, np.ndarray]:
    return np.clip(xs, 0, width - 1), np.clip(ys, 0, height - 1)


__all__ = ["Color", "TRANSPARENT", "Sampler", "clamp_indices"]

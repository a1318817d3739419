"""pytest fixtures shared by the perspective_crop test suite."""

from __future__ import annotations

import numpy as np
import pytest

from perspective_crop.raster import RasterImage

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def red_blue_raster() -> RasterImage:
    """4x4 raster: red in the 2x2 top-left block, blue elsewhere."""
    pixels = np.empty((4, 4, 4), dtype=np.uint8)
    pixels[:] = BLUE
    pixels[0:2, 0:2] = RED
    return RasterImage(pixels)


@pytest.fixture
def gradient_raster() -> RasterImage:
    """64x48 smooth RGBA gradient."""
    ys, xs = np.mgrid[0:48, 0:64]
    pixels = np.stack(
        [xs * 3, ys * 4, (xs + ys) * 2, np.full_like(xs, 255)],
        axis=-1,
    )
    return RasterImage(pixels.astype(np.uint8))


@pytest.fixture
def random_raster() -> RasterImage:
    rng = np.random.default_rng(1234)
    return RasterImage(rng.integers(0, 256, size=(29, 37, 4), dtype=np.uint8))

"""RGBA raster buffers exchanged with the host application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from perspective_crop.errors import InvalidRasterError

CHANNELS = 4


@dataclass(frozen=True, slots=True, eq=False)
class RasterImage:
    """Row-major RGBA image with a top-left origin.

    ``pixels`` has shape (height, width, 4) and dtype uint8. The array is
    marked read-only so a raster handed to the engine cannot change under it.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise InvalidRasterError(f"Expected pixel array of shape (H, W, 4), got {pixels.shape}")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise InvalidRasterError(f"Raster must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}")
        if pixels.dtype != np.uint8:
            raise InvalidRasterError(f"Expected uint8 pixels, got {pixels.dtype}")
        if pixels.flags.writeable or pixels.base is not None:
            pixels = pixels.copy()
            pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build a raster from grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) data."""
        data = np.asarray(array)
        if data.dtype != np.uint8:
            if not np.issubdtype(data.dtype, np.number):
                raise InvalidRasterError(f"Unsupported pixel dtype {data.dtype}")
            data = np.clip(np.rint(data), 0, 255).astype(np.uint8)
        if data.ndim == 2:
            data = np.repeat(data[..., None], 3, axis=2)
        if data.ndim == 3 and data.shape[2] == 3:
            alpha = np.full(data.shape[:2] + (1,), 255, dtype=np.uint8)
            data = np.concatenate([data, alpha], axis=2)
        return cls(data)

    @classmethod
    def from_rgba_bytes(cls, data: bytes, width: int, height: int) -> "RasterImage":
        """Wrap a flat RGBA buffer such as a canvas ``ImageData`` payload."""
        expected = width * height * CHANNELS
        if width <= 0 or height <= 0 or len(data) != expected:
            raise InvalidRasterError(
                f"Buffer of {len(data)} bytes does not match {width}x{height} RGBA ({expected} bytes)"
            )
        return cls(np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, CHANNELS))

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        return cls(np.zeros((height, width, CHANNELS), dtype=np.uint8))

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        r, g, b, a = (int(value) for value in self.pixels[y, x])
        return r, g, b, a

    def to_rgba_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def to_array(self) -> np.ndarray:
        """Writable copy of the pixel data."""
        return self.pixels.copy()


__all__ = ["CHANNELS", "RasterImage"]

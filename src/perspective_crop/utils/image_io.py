"""Image IO helper routines."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
from loguru import logger

from perspective_crop.raster import RasterImage

_NO_ALPHA_SUFFIXES = {".jpg", ".jpeg", ".bmp"}


def load_raster(path: Path) -> RasterImage:
    """Decode an image file into an RGBA raster."""
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise RuntimeError(f"Failed to read image from {path}")
    if image.dtype == np.uint16:
        image = (image // 257).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 3:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    elif image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    logger.debug(f"Loaded {path} with shape {image.shape}")
    return RasterImage.from_array(image)


def save_raster(raster: RasterImage, path: Path) -> Path:
    """Encode an RGBA raster; formats without alpha drop the fourth channel."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in _NO_ALPHA_SUFFIXES:
        image = cv2.cvtColor(raster.to_array(), cv2.COLOR_RGBA2BGR)
    else:
        image = cv2.cvtColor(raster.to_array(), cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(path), image):
        raise RuntimeError(f"Failed to write image to {path}")
    logger.debug(f"Saved {raster.width}x{raster.height} raster to {path}")
    return path

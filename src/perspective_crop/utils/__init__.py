"""Host-side helpers that sit outside the crop engine."""

from .image_io import load_raster, save_raster  # noqa: F401

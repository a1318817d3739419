"""Perspective crop orchestration: estimate, invert, resample."""

from __future__ import annotations

import numbers
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np
from loguru import logger

from perspective_crop.config import EngineConfig
from perspective_crop.errors import InvalidDimensionsError, WindingOrderError
from perspective_crop.estimation import Homography, HomographyEstimator, InverseMapper
from perspective_crop.geometry import DEFAULT_EPSILON, PointLike, Quadrilateral
from perspective_crop.raster import CHANNELS, RasterImage
from perspective_crop.sampling import BilinearSampler, Sampler, get_sampler

QuadLike = Union[Quadrilateral, Iterable[PointLike]]


class WindingPolicy(str, Enum):
    """How the engine treats the corner order of the supplied quadrilateral."""

    AS_GIVEN = "as_given"
    STRICT = "strict"
    AUTO = "auto"


class PerspectiveCropEngine:
    """Rectifies a quadrilateral region of a raster into an axis-aligned image.

    The engine holds no per-crop state: every call to :meth:`crop` estimates
    its own homography from a snapshot of four corners and discards it when
    the output raster is complete.
    """

    def __init__(
        self,
        sampler: Optional[Sampler] = None,
        winding: Union[WindingPolicy, str] = WindingPolicy.AS_GIVEN,
        epsilon: float = DEFAULT_EPSILON,
        workers: int = 1,
        rows_per_band: int = 64,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        if rows_per_band < 1:
            raise ValueError("rows_per_band must be at least 1")
        self._sampler = sampler or BilinearSampler()
        self._winding = WindingPolicy(winding)
        self._estimator = HomographyEstimator(epsilon=epsilon)
        self._inverse_mapper = InverseMapper(epsilon=epsilon)
        self._workers = workers
        self._rows_per_band = rows_per_band

    @classmethod
    def from_config(cls, config: EngineConfig) -> "PerspectiveCropEngine":
        return cls(
            sampler=get_sampler(config.interpolation),
            winding=config.winding,
            epsilon=config.epsilon,
            workers=config.workers,
            rows_per_band=config.rows_per_band,
        )

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    @property
    def winding(self) -> WindingPolicy:
        return self._winding

    def crop(
        self,
        source: RasterImage,
        quad: QuadLike,
        output_width: int,
        output_height: int,
    ) -> RasterImage:
        """Rectify ``quad`` from ``source`` into an ``output_width`` x ``output_height`` raster.

        Raises:
            InvalidDimensionsError: If either output dimension is not a positive integer.
            WindingOrderError: If the strict policy sees counter-clockwise corners,
                or the auto policy cannot put them in a convex clockwise order.
            DegenerateGeometryError: If the corners cannot define a homography.
            SingularMatrixError: If the homography cannot be inverted.
        """
        _validate_dimensions(output_width, output_height)
        start_time = time.perf_counter()

        inverse = self.output_to_source(quad, output_width, output_height)
        pixels = np.zeros((output_height, output_width, CHANNELS), dtype=np.uint8)
        bands = _row_bands(output_height, self._rows_per_band)

        if self._workers > 1 and len(bands) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                futures = [
                    pool.submit(self._render_band, source, inverse, pixels, row_start, row_stop)
                    for row_start, row_stop in bands
                ]
                for future in futures:
                    future.result()
        else:
            for row_start, row_stop in bands:
                self._render_band(source, inverse, pixels, row_start, row_stop)

        pixels.setflags(write=False)
        elapsed_ms = (time.perf_counter() - start_time) * 1_000
        logger.debug(
            f"Cropped {source.width}x{source.height} -> {output_width}x{output_height} "
            f"({self._sampler.name}, {len(bands)} band(s)) in {elapsed_ms:.2f} ms"
        )
        return RasterImage(pixels)

    def output_to_source(self, quad: QuadLike, output_width: float, output_height: float) -> Homography:
        """Inverse homography mapping output pixel coordinates back into the source."""
        corners = self._apply_winding(_as_quadrilateral(quad))
        target = Quadrilateral.from_rect(output_width, output_height)
        forward = self._estimator.estimate(corners, target)
        return self._inverse_mapper.invert(forward)

    def _apply_winding(self, quad: Quadrilateral) -> Quadrilateral:
        if self._winding is WindingPolicy.STRICT and quad.signed_area() < 0.0:
            raise WindingOrderError("Corners must run clockwise on screen")
        if self._winding is WindingPolicy.AUTO:
            return quad.ordered()
        return quad

    def _render_band(
        self,
        source: RasterImage,
        inverse: Homography,
        pixels: np.ndarray,
        row_start: int,
        row_stop: int,
    ) -> None:
        # Each band writes only pixels[row_start:row_stop].
        width = pixels.shape[1]
        grid_x, grid_y = np.meshgrid(
            np.arange(width, dtype=np.float64),
            np.arange(row_start, row_stop, dtype=np.float64),
        )
        mapped = inverse.apply_many(np.stack([grid_x.ravel(), grid_y.ravel()], axis=1))
        colors = self._sampler.sample_many(source, mapped[:, 0], mapped[:, 1])
        band = np.clip(np.rint(colors), 0, 255).astype(np.uint8)
        pixels[row_start:row_stop] = band.reshape(row_stop - row_start, width, CHANNELS)


def _as_quadrilateral(quad: QuadLike) -> Quadrilateral:
    if isinstance(quad, Quadrilateral):
        return quad
    return Quadrilateral.from_points(quad)


def _validate_dimensions(width: object, height: object) -> None:
    for name, value in (("output_width", width), ("output_height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
            raise InvalidDimensionsError(f"{name} must be a positive integer, got {value!r}")


def _row_bands(height: int, rows_per_band: int) -> List[Tuple[int, int]]:
    return [(start, min(start + rows_per_band, height)) for start in range(0, height, rows_per_band)]


def crop(
    source: RasterImage,
    quad: QuadLike,
    output_width: int,
    output_height: int,
) -> RasterImage:
    """Crop with a default bilinear engine."""
    return PerspectiveCropEngine().crop(source, quad, output_width, output_height)


__all__ = ["PerspectiveCropEngine", "QuadLike", "WindingPolicy", "crop"]

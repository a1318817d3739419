"""End-to-end tests for the perspective crop engine."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from perspective_crop.config import EngineConfig
from perspective_crop.engine import PerspectiveCropEngine, WindingPolicy, crop
from perspective_crop.errors import (
    DegenerateGeometryError,
    InvalidDimensionsError,
    WindingOrderError,
)
from perspective_crop.geometry import Quadrilateral
from perspective_crop.raster import RasterImage
from perspective_crop.sampling import NearestNeighborSampler

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def test_identity_crop_reproduces_source(random_raster: RasterImage) -> None:
    quad = Quadrilateral.from_rect(random_raster.width, random_raster.height)

    result = crop(random_raster, quad, random_raster.width, random_raster.height)

    np.testing.assert_array_equal(result.pixels, random_raster.pixels)


def test_identity_sub_region_matches_slice(random_raster: RasterImage) -> None:
    quad = Quadrilateral.from_rect(10, 8).translated(5, 3)

    result = crop(random_raster, quad, 10, 8)

    np.testing.assert_array_equal(result.pixels, random_raster.pixels[3:11, 5:15])


def test_red_blue_scenario_same_scale(red_blue_raster: RasterImage) -> None:
    result = crop(red_blue_raster, [(0, 0), (2, 0), (2, 2), (0, 2)], 2, 2)

    # The quad equals the output rectangle, so every output pixel samples a red grid point.
    assert result.shape == (2, 2)
    for y in range(2):
        for x in range(2):
            assert result.pixel(x, y) == RED


def test_red_blue_scenario_downscaled(red_blue_raster: RasterImage) -> None:
    result = crop(red_blue_raster, [(0, 0), (3, 0), (3, 3), (0, 3)], 2, 2)

    # Output (x, y) samples the source at (1.5x, 1.5y).
    expected = np.array(
        [
            [RED, (128, 0, 128, 255)],
            [(128, 0, 128, 255), (64, 0, 191, 255)],
        ],
        dtype=np.int16,
    )
    np.testing.assert_allclose(result.pixels.astype(np.int16), expected, atol=1)
    assert result.pixel(0, 0) == RED


def test_red_blue_scenario_half_scale(red_blue_raster: RasterImage) -> None:
    result = crop(red_blue_raster, [(0, 0), (4, 0), (4, 4), (0, 4)], 2, 2)

    assert result.pixel(0, 0) == RED
    assert result.pixel(1, 0) == BLUE
    assert result.pixel(0, 1) == BLUE
    assert result.pixel(1, 1) == BLUE


def test_output_has_requested_size(gradient_raster: RasterImage) -> None:
    result = crop(gradient_raster, [(5, 4), (60, 2), (58, 44), (3, 40)], 31, 17)
    assert (result.width, result.height) == (31, 17)


def test_matches_opencv_inverse_warp(gradient_raster: RasterImage) -> None:
    quad = [(5.0, 4.0), (60.0, 2.0), (58.0, 44.0), (3.0, 40.0)]
    engine = PerspectiveCropEngine()
    inverse = engine.output_to_source(quad, 40, 30)

    result = engine.crop(gradient_raster, quad, 40, 30)
    reference = cv2.warpPerspective(
        gradient_raster.to_array(),
        inverse.values.copy(),
        (40, 30),
        flags=cv2.INTER_LINEAR | cv2.WARP_INVERSE_MAP,
        borderMode=cv2.BORDER_REPLICATE,
    )

    diff = np.abs(result.pixels.astype(np.int16) - reference.astype(np.int16))
    assert diff.max() <= 3
    assert diff.mean() < 1.0


def test_threaded_bands_match_single_thread(random_raster: RasterImage) -> None:
    quad = [(2.5, 1.0), (35.0, 3.0), (33.0, 27.5), (1.0, 25.0)]
    single = PerspectiveCropEngine(rows_per_band=1000).crop(random_raster, quad, 50, 41)
    threaded = PerspectiveCropEngine(workers=4, rows_per_band=7).crop(random_raster, quad, 50, 41)

    np.testing.assert_array_equal(single.pixels, threaded.pixels)


def test_source_is_not_mutated(random_raster: RasterImage) -> None:
    before = random_raster.pixels.copy()

    crop(random_raster, [(1, 1), (30, 2), (28, 20), (2, 25)], 16, 16)

    np.testing.assert_array_equal(random_raster.pixels, before)


def test_output_is_read_only(random_raster: RasterImage) -> None:
    result = crop(random_raster, Quadrilateral.from_rect(4, 4), 4, 4)
    assert not result.pixels.flags.writeable


@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-1, 3), (2.5, 3), (True, 3), ("4", 4)])
def test_invalid_dimensions_fail_fast(random_raster: RasterImage, width, height) -> None:
    with pytest.raises(InvalidDimensionsError):
        crop(random_raster, [(0, 0), (0, 0), (0, 0), (0, 0)], width, height)


def test_numpy_integer_dimensions_are_accepted(random_raster: RasterImage) -> None:
    result = crop(random_raster, Quadrilateral.from_rect(3, 3), np.int64(3), np.int32(3))
    assert result.shape == (3, 3)


def test_collinear_quad_raises(random_raster: RasterImage) -> None:
    with pytest.raises(DegenerateGeometryError):
        crop(random_raster, [(0, 0), (10, 0), (20, 0), (30, 0)], 8, 8)


def test_reversed_winding_mirrors_across_diagonal() -> None:
    rng = np.random.default_rng(99)
    source = RasterImage(rng.integers(0, 256, size=(4, 4, 4), dtype=np.uint8))
    reversed_quad = Quadrilateral.from_rect(4, 4).reversed()

    result = crop(source, reversed_quad, 4, 4)

    np.testing.assert_array_equal(result.pixels, np.transpose(source.pixels, (1, 0, 2)))


def test_strict_winding_rejects_counter_clockwise(random_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.STRICT)
    with pytest.raises(WindingOrderError):
        engine.crop(random_raster, Quadrilateral.from_rect(4, 4).reversed(), 4, 4)


def test_strict_winding_accepts_clockwise(random_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(winding="strict")
    result = engine.crop(random_raster, Quadrilateral.from_rect(4, 4), 4, 4)
    np.testing.assert_array_equal(result.pixels, random_raster.pixels[:4, :4])


def test_strict_winding_accepts_clockwise_from_any_corner(random_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.STRICT)

    result = engine.crop(random_raster, [(4, 0), (4, 4), (0, 4), (0, 0)], 4, 4)

    np.testing.assert_array_equal(result.pixels, np.rot90(random_raster.pixels[0:4, 1:5]))


def test_strict_winding_error_names_the_rule(random_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.STRICT)
    with pytest.raises(WindingOrderError, match="clockwise"):
        engine.crop(random_raster, [(0, 0), (0, 4), (4, 4), (4, 0)], 4, 4)


DIAMOND = [(30, 8), (46, 24), (30, 40), (14, 24)]


@pytest.mark.parametrize(
    "corners",
    [
        DIAMOND,
        DIAMOND[1:] + DIAMOND[:1],
        DIAMOND[::-1],
        [DIAMOND[2], DIAMOND[0], DIAMOND[3], DIAMOND[1]],
    ],
)
def test_auto_winding_handles_rotated_quad(gradient_raster: RasterImage, corners) -> None:
    expected = PerspectiveCropEngine().crop(gradient_raster, DIAMOND, 16, 16)

    result = PerspectiveCropEngine(winding=WindingPolicy.AUTO).crop(gradient_raster, corners, 16, 16)

    np.testing.assert_array_equal(result.pixels, expected.pixels)


def test_auto_winding_maps_output_corners_onto_diamond() -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.AUTO)

    inverse = engine.output_to_source([(0, 5), (5, 10), (5, 0), (10, 5)], 8, 8)

    mapped = inverse.apply_many(np.array([(0, 0), (8, 0), (8, 8), (0, 8)], dtype=np.float64))
    np.testing.assert_allclose(mapped, [(5, 0), (10, 5), (5, 10), (0, 5)], atol=1e-9)


def test_auto_winding_rejects_concave_quad(random_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.AUTO)
    with pytest.raises(WindingOrderError):
        engine.crop(random_raster, [(0, 0), (10, 0), (3, 2), (0, 10)], 4, 4)


@pytest.mark.parametrize(
    "corners",
    [
        [(0, 0), (0, 6), (6, 6), (6, 0)],
        [(6, 0), (6, 6), (0, 6), (0, 0)],
        [(6, 6), (0, 6), (0, 0), (6, 0)],
    ],
)
def test_auto_winding_normalises_corner_order(random_raster: RasterImage, corners) -> None:
    engine = PerspectiveCropEngine(winding=WindingPolicy.AUTO)

    result = engine.crop(random_raster, corners, 6, 6)

    np.testing.assert_array_equal(result.pixels, random_raster.pixels[:6, :6])


def test_nearest_sampler_picks_source_pixels(red_blue_raster: RasterImage) -> None:
    engine = PerspectiveCropEngine(sampler=NearestNeighborSampler())

    result = engine.crop(red_blue_raster, [(0, 0), (3, 0), (3, 3), (0, 3)], 2, 2)

    assert result.pixel(0, 0) == RED
    assert result.pixel(1, 0) == RED
    assert result.pixel(1, 1) == RED


def test_from_config_wires_engine_settings() -> None:
    engine = PerspectiveCropEngine.from_config(
        EngineConfig(interpolation="nearest", winding="auto", workers=3, rows_per_band=8)
    )

    assert isinstance(engine.sampler, NearestNeighborSampler)
    assert engine.winding is WindingPolicy.AUTO


def test_engine_rejects_bad_worker_count() -> None:
    with pytest.raises(ValueError):
        PerspectiveCropEngine(workers=0)

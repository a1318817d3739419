"""Rectify a quadrilateral region of an image file from the command line."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence, Tuple

from loguru import logger

from perspective_crop.config import CropConfig, load_config
from perspective_crop.engine import PerspectiveCropEngine
from perspective_crop.errors import PerspectiveCropError
from perspective_crop.logging_setup import configure_logging
from perspective_crop.utils.image_io import load_raster, save_raster


def parse_point(text: str) -> Tuple[float, float]:
    try:
        x, y = (float(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a corner as x,y but got '{text}'") from None
    return x, y


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", type=Path, required=True, help="Source image")
    parser.add_argument("--output", type=Path, required=True, help="Where to write the rectified image")
    parser.add_argument(
        "--corners",
        type=parse_point,
        nargs=4,
        required=True,
        metavar="X,Y",
        help="Four corners in source pixels, consecutive around the region",
    )
    parser.add_argument("--width", type=int, help="Output width (default: from config)")
    parser.add_argument("--height", type=int, help="Output height (default: from config)")
    parser.add_argument("--config", type=Path, help="Optional YAML configuration")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config) if args.config else CropConfig()
    configure_logging(cfg.logging)

    width = args.width if args.width is not None else cfg.output.width
    height = args.height if args.height is not None else cfg.output.height
    engine = PerspectiveCropEngine.from_config(cfg.engine)

    try:
        source = load_raster(args.input)
        result = engine.crop(source, args.corners, width, height)
        save_raster(result, args.output)
    except (PerspectiveCropError, RuntimeError) as exc:
        logger.error(f"Crop failed: {exc}")
        return 1

    logger.info(f"Wrote {width}x{height} crop of {args.input} to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Raster samplers used by the crop engine."""

from typing import Dict, Type

from .base import TRANSPARENT, Color, Sampler  # noqa: F401
from .bilinear import BilinearSampler  # noqa: F401
from .nearest import NearestNeighborSampler  # noqa: F401

SAMPLERS: Dict[str, Type[Sampler]] = {
    BilinearSampler.name: BilinearSampler,
    NearestNeighborSampler.name: NearestNeighborSampler,
}


def get_sampler(name: str) -> Sampler:
    try:
        return SAMPLERS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unsupported interpolation: {name}") from None

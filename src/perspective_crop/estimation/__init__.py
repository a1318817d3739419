"""Forward and inverse homography estimation."""

from .homography import Homography, HomographyEstimator, build_dlt_system, estimate_homography  # noqa: F401
from .inverse import InverseMapper, invert_homography  # noqa: F401

"""Planar perspective correction of quadrilateral image regions."""

from .config import CropConfig, load_config  # noqa: F401
from .engine import PerspectiveCropEngine, WindingPolicy, crop  # noqa: F401
from .errors import (  # noqa: F401
    DegenerateGeometryError,
    InvalidDimensionsError,
    InvalidRasterError,
    PerspectiveCropError,
    SingularMatrixError,
    WindingOrderError,
)
from .estimation import Homography, HomographyEstimator, InverseMapper  # noqa: F401
from .geometry import Matrix3, Point2D, Quadrilateral  # noqa: F401
from .handles import CornerHandles  # noqa: F401
from .raster import RasterImage  # noqa: F401
from .sampling import BilinearSampler, Color, NearestNeighborSampler  # noqa: F401

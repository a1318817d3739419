"""Inversion of homographies for output-to-source sampling."""

from __future__ import annotations

from loguru import logger

from perspective_crop.errors import SingularMatrixError
from perspective_crop.geometry import DEFAULT_EPSILON

from .homography import Homography


class InverseMapper:
    """Turns a source-to-output homography into a normalised output-to-source one."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON) -> None:
        self._epsilon = epsilon

    def invert(self, homography: Homography) -> Homography:
        """Return the inverse of ``homography`` scaled so that ``M[2][2] == 1``.

        Raises:
            SingularMatrixError: If the homography has no inverse or the
                inverse cannot be normalised.
        """
        try:
            inverse = homography.matrix.inverse(epsilon=self._epsilon).normalized(epsilon=self._epsilon)
        except SingularMatrixError:
            logger.warning("Homography is not invertible")
            raise
        return Homography(inverse)


def invert_homography(homography: Homography, epsilon: float = DEFAULT_EPSILON) -> Homography:
    return InverseMapper(epsilon=epsilon).invert(homography)


__all__ = ["InverseMapper", "invert_homography"]

"""Small dense solvers used by homography estimation.

Only an 8x8 solve and a 3x3 inverse are ever needed, so both are written out
here instead of going through a general-purpose routine.
"""

from __future__ import annotations

import numpy as np

from perspective_crop.errors import SingularMatrixError

DEFAULT_EPSILON = 1e-10


def solve(a: np.ndarray, b: np.ndarray, epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    """Solve ``a @ x = b`` by Gaussian elimination with partial pivoting.

    Args:
        a: Square coefficient matrix of shape (N, N).
        b: Right-hand side of shape (N,).
        epsilon: Relative pivot tolerance. A pivot smaller than
            ``epsilon * max(|a|)`` marks the system as singular.

    Returns:
        Solution vector of shape (N,).

    Raises:
        SingularMatrixError: If no usable pivot exists for some column.
    """
    a = np.array(a, dtype=np.float64)
    b = np.array(b, dtype=np.float64)
    n = a.shape[0]
    if a.shape != (n, n) or b.shape != (n,):
        raise ValueError(f"Expected an (N, N) system with an (N,) right-hand side, got {a.shape} and {b.shape}")

    scale = float(np.abs(a).max()) if a.size else 0.0
    tolerance = epsilon * max(scale, 1.0)

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(a[col:, col])))
        if abs(a[pivot_row, col]) <= tolerance:
            raise SingularMatrixError(f"Linear system is singular (no pivot in column {col})")
        if pivot_row != col:
            a[[col, pivot_row]] = a[[pivot_row, col]]
            b[[col, pivot_row]] = b[[pivot_row, col]]

        for row in range(col + 1, n):
            factor = a[row, col] / a[col, col]
            if factor == 0.0:
                continue
            a[row, col:] -= factor * a[col, col:]
            b[row] -= factor * b[col]

    x = np.zeros(n, dtype=np.float64)
    for row in range(n - 1, -1, -1):
        x[row] = (b[row] - a[row, row + 1 :] @ x[row + 1 :]) / a[row, row]
    return x


def determinant3(m: np.ndarray) -> float:
    """Determinant of a 3x3 matrix by cofactor expansion along the first row."""
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def inverse3(m: np.ndarray, epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    """Invert a 3x3 matrix through its adjugate.

    The matrix counts as singular when ``|det|`` is below ``epsilon`` times the
    product of its row norms, which keeps the test independent of the overall
    scale of a homography.
    """
    m = np.asarray(m, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")
    if not np.all(np.isfinite(m)):
        raise SingularMatrixError("Matrix contains non-finite entries")

    det = determinant3(m)
    bound = float(np.prod(np.linalg.norm(m, axis=1)))
    if bound == 0.0 or abs(det) <= epsilon * bound:
        raise SingularMatrixError(f"Matrix is not invertible (det={det:.3e})")

    adjugate = np.array(
        [
            [
                m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1],
                m[0, 2] * m[2, 1] - m[0, 1] * m[2, 2],
                m[0, 1] * m[1, 2] - m[0, 2] * m[1, 1],
            ],
            [
                m[1, 2] * m[2, 0] - m[1, 0] * m[2, 2],
                m[0, 0] * m[2, 2] - m[0, 2] * m[2, 0],
                m[0, 2] * m[1, 0] - m[0, 0] * m[1, 2],
            ],
            [
                m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0],
                m[0, 1] * m[2, 0] - m[0, 0] * m[2, 1],
                m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0],
            ],
        ],
        dtype=np.float64,
    )
    return adjugate / det


__all__ = ["DEFAULT_EPSILON", "solve", "determinant3", "inverse3"]

"""
Reference CPU provider built on NumPy (BLAS via numpy.dot / matmul).
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray


def as_matrix(data: NDArray[Any], rows: int, columns: int) -> NDArray[Any]:
    """View a flat column-major buffer as a (rows, columns) array."""
    return data.reshape((rows, columns), order='F')


class NumpyProvider:
    """CPU provider; the numerical reference for every other provider."""

    @property
    def name(self) -> str:
        return 'cpu_numpy'

    def dot_product(self, x: NDArray[Any], y: NDArray[Any]) -> Any:
        return np.dot(x, y)

    def matrix_multiply(
        self,
        transpose_a: bool,
        transpose_b: bool,
        alpha: Any,
        a: NDArray[Any],
        rows_a: int,
        columns_a: int,
        b: NDArray[Any],
        rows_b: int,
        columns_b: int,
        beta: Any,
        c: NDArray[Any],
    ) -> None:
        left = as_matrix(a, rows_a, columns_a)
        right = as_matrix(b, rows_b, columns_b)
        if transpose_a:
            left = left.T
        if transpose_b:
            right = right.T
        out = as_matrix(c, left.shape[0], right.shape[1])
        product = left @ right
        if beta == 0:
            out[:, :] = alpha * product if alpha != 1 else product
        else:
            out[:, :] = alpha * product + beta * out

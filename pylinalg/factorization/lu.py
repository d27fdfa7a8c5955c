"""
LU factorization with partial pivoting.

Thin wrapper over LAPACK getrf/getrs (scipy.linalg.lu_factor / lu_solve).
A new factorization is computed for every call that needs one; nothing
is cached on the source matrix.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from pylinalg.core.exceptions import SingularMatrixError
from pylinalg.core.tolerances import machine_epsilon
from pylinalg.core.validation import check_square

if TYPE_CHECKING:
    from pylinalg.matrix.base import Matrix


@dataclass(frozen=True)
class LU:
    """
    Result of P A = L U.

    Attributes:
        factors: Combined L (unit lower, implicit diagonal) and U
        pivots: LAPACK pivot indices, row i was swapped with pivots[i]
    """
    factors: NDArray[Any]
    pivots: NDArray[np.int32]

    @classmethod
    def create(cls, matrix: Matrix) -> LU:
        """
        Factor a square matrix.

        Raises:
            NotSquareError: If matrix is not square
        """
        check_square(matrix, "matrix")
        with warnings.catch_warnings():
            # exact singularity is reported by inverse(), determinant is 0
            warnings.simplefilter('ignore', LinAlgWarning)
            factors, pivots = lu_factor(matrix.to_array(), check_finite=False)
        return cls(factors=factors, pivots=pivots)

    @property
    def order(self) -> int:
        return self.factors.shape[0]

    @property
    def determinant(self) -> Any:
        """Product of U's diagonal, sign-corrected for row swaps."""
        swaps = int(np.count_nonzero(self.pivots != np.arange(self.order)))
        det = np.prod(np.diag(self.factors))
        return -det if swaps % 2 else det

    def _check_invertible(self) -> None:
        diagonal = np.abs(np.diag(self.factors))
        zero = np.flatnonzero(diagonal == 0)
        if zero.size:
            raise SingularMatrixError(
                f"matrix: singular, zero pivot at index {int(zero[0])}",
                matrix_name="matrix",
                pivot_index=int(zero[0]),
            )
        eps = machine_epsilon(self.factors.dtype)
        if diagonal.min() < diagonal.max() * self.order * eps:
            warnings.warn(
                f"Matrix is nearly singular (pivot ratio "
                f"{diagonal.min() / diagonal.max():.2e}); result may be inaccurate.",
                RuntimeWarning,
                stacklevel=3,
            )

    def solve(self, b: NDArray[Any]) -> NDArray[Any]:
        """
        Solve A x = b.

        Raises:
            SingularMatrixError: If A is singular
        """
        self._check_invertible()
        return lu_solve((self.factors, self.pivots), b, check_finite=False)

    def inverse(self) -> NDArray[Any]:
        """
        A^-1 as a NumPy array.

        Raises:
            SingularMatrixError: If A is singular
        """
        self._check_invertible()
        identity = np.eye(self.order, dtype=self.factors.dtype)
        return lu_solve((self.factors, self.pivots), identity, check_finite=False)

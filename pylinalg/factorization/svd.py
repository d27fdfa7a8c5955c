"""
Singular value decomposition.

Thin wrapper over LAPACK gesdd (numpy.linalg.svd). Rank, condition number
and the spectral norm are read off the singular values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from pylinalg.core.tolerances import machine_epsilon

if TYPE_CHECKING:
    from pylinalg.matrix.base import Matrix


@dataclass(frozen=True)
class SVD:
    """
    Result of A = U diag(s) V^H.

    Attributes:
        s: Singular values in descending order (length min(m, n))
        u: Left singular vectors (m x m), None unless computed
        vt: Conjugate-transposed right singular vectors (n x n), None unless computed
        shape: Shape of the factored matrix
    """
    s: NDArray[np.floating[Any]]
    u: NDArray[Any] | None
    vt: NDArray[Any] | None
    shape: tuple[int, int]

    @classmethod
    def create(cls, matrix: Matrix, compute_vectors: bool = False) -> SVD:
        array = matrix.to_array()
        if compute_vectors:
            u, s, vt = np.linalg.svd(array, full_matrices=True)
            return cls(s=s, u=u, vt=vt, shape=array.shape)
        s = np.linalg.svd(array, compute_uv=False)
        return cls(s=s, u=None, vt=None, shape=array.shape)

    @property
    def rank(self) -> int:
        """Number of singular values above max(m, n) * eps * s[0]."""
        if self.s.size == 0 or self.s[0] == 0:
            return 0
        tol = max(self.shape) * machine_epsilon(self.s.dtype) * self.s[0]
        return int(np.sum(self.s > tol))

    @property
    def condition_number(self) -> float:
        """s[0] / s[-1]; infinite for a singular matrix."""
        smallest = self.s[-1]
        if smallest == 0:
            return float('inf')
        return float(self.s[0] / smallest)

    @property
    def norm2(self) -> float:
        """Spectral norm, the largest singular value."""
        return float(self.s[0])

"""
Tests for the LU and SVD result objects.

Validates:
    - LU: determinant with pivot sign, solve, inverse, singular detection
      and the near-singularity warning
    - SVD: singular values against NumPy, reconstruction, rank tolerance,
      condition number of a singular matrix
"""

import numpy as np
import pytest

from pylinalg.core.exceptions import NotSquareError, SingularMatrixError
from pylinalg.factorization import LU, SVD
from pylinalg.matrix import DenseMatrix, SparseMatrix


class TestLU:
    """LU.create and its derived quantities."""

    def test_determinant_matches_numpy(self, rng):
        values = rng.standard_normal((4, 4))
        lu = LU.create(DenseMatrix.of_array(values))
        assert lu.order == 4
        assert lu.determinant == pytest.approx(np.linalg.det(values))

    def test_solve(self, rng):
        values = rng.standard_normal((3, 3)) + 3 * np.eye(3)
        b = rng.standard_normal(3)
        x = LU.create(SparseMatrix.of_array(values)).solve(b)
        np.testing.assert_allclose(values @ x, b)

    def test_inverse(self):
        values = np.array([[4.0, 7.0], [2.0, 6.0]])
        np.testing.assert_allclose(LU.create(DenseMatrix.of_array(values)).inverse(), np.linalg.inv(values))

    def test_singular_solve(self):
        lu = LU.create(DenseMatrix.of_array([[1.0, 2.0], [2.0, 4.0]]))
        with pytest.raises(SingularMatrixError) as info:
            lu.solve(np.ones(2))
        assert info.value.pivot_index == 1

    def test_nearly_singular_warns(self):
        values = np.array([[1.0, 1.0], [1.0, 1.0 + np.finfo(float).eps]])
        with pytest.warns(RuntimeWarning, match="nearly singular"):
            LU.create(DenseMatrix.of_array(values)).inverse()

    def test_not_square(self):
        with pytest.raises(NotSquareError):
            LU.create(DenseMatrix.zeros(2, 3))

    def test_fresh_each_time(self):
        m = DenseMatrix.of_array([[2.0, 0.0], [0.0, 3.0]])
        assert m.determinant() == pytest.approx(6.0)
        m[1, 1] = 5.0
        assert m.determinant() == pytest.approx(10.0)


class TestSVD:
    """SVD.create and its derived quantities."""

    def test_singular_values(self, rng):
        values = rng.standard_normal((4, 3))
        svd = SVD.create(DenseMatrix.of_array(values))
        np.testing.assert_allclose(svd.s, np.linalg.svd(values, compute_uv=False))
        assert svd.u is None
        assert svd.shape == (4, 3)

    def test_reconstruction(self, rng):
        values = rng.standard_normal((3, 2))
        svd = SVD.create(DenseMatrix.of_array(values), compute_vectors=True)
        sigma = np.zeros((3, 2))
        sigma[:2, :2] = np.diag(svd.s)
        np.testing.assert_allclose(svd.u @ sigma @ svd.vt, values, atol=1e-12)

    def test_rank_ignores_roundoff(self):
        values = np.outer([1.0, 2.0, 3.0], [1.0, -1.0, 0.5])
        assert SVD.create(DenseMatrix.of_array(values)).rank == 1

    def test_singular_condition_number(self):
        svd = SVD.create(DenseMatrix.zeros(2, 2))
        assert svd.rank == 0
        assert svd.condition_number == float('inf')

    def test_norm2(self):
        assert SVD.create(DenseMatrix.of_array([[3.0, 0.0], [0.0, -5.0]])).norm2 == pytest.approx(5.0)

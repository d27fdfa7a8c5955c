"""
Tests for the builder factory functions and ScipyDistribution.

Validates:
    - Every factory returns the expected kind, shape and element type
    - dense_of_column_major wraps the caller's buffer by reference
    - matrix_of_storage / vector_of_storage pick the matching container
    - Random construction draws through the Distribution protocol
"""

import numpy as np
import pytest
import scipy.sparse as sp
from scipy import stats

from pylinalg import builder
from pylinalg.core.exceptions import DimensionError, NotSquareError, ValidationError
from pylinalg.distributions import ScipyDistribution
from pylinalg.matrix import (
    DenseMatrix,
    DiagonalMatrix,
    GenericMatrix,
    SparseMatrix,
    SquareMatrix,
)
from pylinalg.vector import DenseVector, GenericVector, SparseVector


class TestMatrixFactories:
    """Zero, array and identity constructors."""

    @pytest.mark.parametrize("factory,kind", [
        (builder.dense, DenseMatrix),
        (builder.sparse, SparseMatrix),
        (builder.diagonal, DiagonalMatrix),
    ])
    def test_zeros(self, factory, kind):
        m = factory(2, 3)
        assert isinstance(m, kind)
        assert m.shape == (2, 3)
        assert m.dtype == np.float64
        assert not m.to_array().any()

    def test_dtype(self):
        assert builder.dense(2, 2, np.complex64).dtype == np.complex64

    def test_integer_input_promotes(self):
        assert builder.dense_of_array([[1, 2], [3, 4]]).dtype == np.float64

    def test_identities(self):
        assert isinstance(builder.identity(3), DiagonalMatrix)
        assert isinstance(builder.dense_identity(3), DenseMatrix)
        assert builder.identity(3) == builder.dense_identity(3)

    def test_square(self):
        assert isinstance(builder.square(2), SquareMatrix)
        with pytest.raises(NotSquareError):
            builder.square_of_array(np.ones((2, 3)))

    def test_sparse_of_scipy(self):
        m = builder.sparse_of_array(sp.random(4, 4, density=0.25, format="csr", random_state=0))
        assert isinstance(m, SparseMatrix)
        assert m.non_zeros_count == 4

    def test_of_rows_and_columns(self):
        rows = [[1.0, 2.0], [3.0, 4.0]]
        assert builder.dense_of_rows(rows) == builder.sparse_of_columns(rows).transpose()

    def test_diagonal_of_values(self):
        d = builder.diagonal_of_values([1.0, 2.0], rows=3, columns=2)
        assert d.shape == (3, 2)
        np.testing.assert_array_equal(d.data, [1.0, 2.0])

    def test_invalid_dimension(self):
        with pytest.raises(ValidationError):
            builder.dense(0, 2)


class TestColumnMajorWrapping:
    """dense_of_column_major shares the caller's buffer."""

    def test_writes_are_shared(self):
        data = np.zeros(6)
        m = builder.dense_of_column_major(2, 3, data)
        m[0, 1] = 5.0
        assert data[2] == 5.0
        data[5] = 7.0
        assert m[1, 2] == 7.0

    def test_wrong_length(self):
        with pytest.raises(DimensionError):
            builder.dense_of_column_major(2, 3, np.zeros(5))

    def test_not_an_array(self):
        with pytest.raises(ValidationError, match="numpy.ndarray"):
            builder.dense_of_column_major(1, 2, [1.0, 2.0])


class TestStorageWrapping:
    """matrix_of_storage / vector_of_storage."""

    def test_builtin_storages(self):
        assert isinstance(builder.matrix_of_storage(DenseMatrix.zeros(2, 2).storage), DenseMatrix)
        assert isinstance(builder.matrix_of_storage(SparseMatrix.zeros(2, 2).storage), SparseMatrix)
        assert isinstance(builder.matrix_of_storage(DiagonalMatrix.zeros(2, 2).storage), DiagonalMatrix)
        assert isinstance(builder.vector_of_storage(SparseVector.zeros(2).storage), SparseVector)

    def test_storage_is_shared(self):
        source = DenseMatrix.zeros(2, 2)
        builder.matrix_of_storage(source.storage)[1, 0] = 3.0
        assert source[1, 0] == 3.0

    def test_user_storages(self, list_matrix_storage, list_vector_storage):
        assert isinstance(builder.matrix_of_storage(list_matrix_storage(2, 2)), GenericMatrix)
        assert isinstance(builder.vector_of_storage(list_vector_storage(2)), GenericVector)


class TestVectorFactories:
    """Vector constructors."""

    def test_vectors(self):
        assert isinstance(builder.dense_vector(3), DenseVector)
        assert isinstance(builder.sparse_vector(3), SparseVector)
        v = builder.sparse_vector_of_array([0.0, 2.0])
        assert v.non_zeros_count == 1
        assert builder.dense_vector_of_array([1, 2]).dtype == np.float64


class TestRandom:
    """random_matrix / random_vector with ScipyDistribution."""

    def test_reproducible(self):
        first = builder.random_matrix(3, 2, ScipyDistribution(stats.norm(), rng=42))
        second = builder.random_matrix(3, 2, ScipyDistribution(stats.norm(), rng=42))
        assert first == second
        assert first.shape == (3, 2)

    def test_support_of_distribution(self):
        v = builder.random_vector(50, ScipyDistribution(stats.uniform(loc=2.0, scale=1.0), rng=0))
        values = v.to_array()
        assert values.min() >= 2.0
        assert values.max() <= 3.0

    def test_float32(self):
        m = builder.random_matrix(2, 2, ScipyDistribution(stats.norm(), rng=1), np.float32)
        assert m.dtype == np.float32

    def test_hand_written_distribution(self):
        class Constant:
            def sample(self):
                return 4.0

        np.testing.assert_array_equal(builder.random_vector(3, Constant()).to_array(), [4.0] * 3)

    def test_not_a_distribution(self):
        with pytest.raises(ValidationError, match="sample"):
            builder.random_matrix(2, 2, object())

    def test_complex_samples_into_real(self):
        class Imaginary:
            def sample(self):
                return 1j

        with pytest.raises(ValidationError, match="complex"):
            builder.random_vector(2, Imaginary())


class TestScipyDistribution:
    """The scipy.stats adapter."""

    def test_requires_rvs(self):
        with pytest.raises(ValidationError, match="scipy.stats"):
            ScipyDistribution(object())

    def test_samples(self):
        draws = ScipyDistribution(stats.poisson(3.0), rng=np.random.default_rng(5)).samples(10)
        assert draws.shape == (10,)

    def test_repr(self):
        assert repr(ScipyDistribution(stats.norm())) == "ScipyDistribution(norm)"

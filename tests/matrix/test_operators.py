"""
Tests for the matrix operator surface.

Validates:
    - Operators agree with the named methods on every representation
    - * is scalar or pointwise; @ is the matrix or matrix-vector product
    - v @ A is the left product through __rmatmul__
    - Matrices have no scalar addition (A + s is a TypeError)
    - Invalid shapes raise DimensionError, unsupported operands TypeError
"""

import numpy as np
import pytest

from pylinalg.core.exceptions import DimensionError, DivideByZeroError
from pylinalg.matrix import DenseMatrix
from pylinalg.vector import DenseVector, SparseVector


class TestAgreementWithMethods:
    """Each operator equals its named method."""

    def test_add_subtract(self, make_matrix, a_array, b_array):
        a, b = make_matrix(a_array), make_matrix(b_array)
        assert a + b == a.add(b)
        assert a - b == a.subtract(b)

    def test_scalar_multiply(self, make_matrix, a_array):
        a = make_matrix(a_array)
        assert a * 3.0 == a.multiply(3.0)
        assert 3.0 * a == a.multiply(3.0)

    def test_pointwise(self, make_matrix, a_array, b_array):
        a = make_matrix(a_array)
        b = make_matrix(b_array + 1.0)
        assert a * b == a.pointwise_multiply(b)
        assert a / b == a.pointwise_divide(b)
        assert a % b == a.pointwise_modulus(b)

    def test_scalar_divide_and_modulus(self, make_matrix, a_array):
        a = make_matrix(a_array)
        assert a / 2.0 == a.divide(2.0)
        assert a % 2.0 == a.modulus(2.0)

    def test_unary(self, make_matrix, a_array):
        a = make_matrix(a_array)
        assert -a == a.negate()
        assert +a == a
        assert +a is not a

    def test_matmul(self, make_matrix, a_array, b_array):
        a, b = make_matrix(a_array), make_matrix(b_array)
        assert a @ b == a.multiply(b)

    def test_matrix_vector(self, make_matrix, a_array):
        a = make_matrix(a_array)
        v = DenseVector.of_array([1.0, -1.0])
        assert a @ v == a.multiply(v)

    def test_vector_matrix(self, make_matrix, a_array):
        a = make_matrix(a_array)
        v = DenseVector.of_array([1.0, -1.0])
        result = v @ a
        assert result == a.left_multiply(v)
        np.testing.assert_array_equal(result.to_array(), [1.0, -3.0])

    def test_sparse_vector_matrix(self, a_array):
        result = SparseVector.of_array([0.0, 1.0]) @ DenseMatrix.of_array(a_array)
        np.testing.assert_array_equal(result.to_array(), [1.0, 3.0])


class TestShortCircuits:
    """Scalar identities on the operator surface."""

    def test_multiply_by_one(self, make_matrix, a_array):
        a = make_matrix(a_array)
        result = a * 1
        assert result == a
        assert result is not a

    def test_multiply_by_zero(self, make_matrix, a_array):
        np.testing.assert_array_equal((0.0 * make_matrix(a_array)).to_array(), np.zeros((2, 2)))

    def test_divide_by_one(self, make_matrix, a_array):
        a = make_matrix(a_array)
        assert a / 1.0 == a

    def test_divide_by_zero(self, make_matrix, a_array):
        with pytest.raises(DivideByZeroError):
            make_matrix(a_array) / 0


class TestInvalidOperands:
    """Shape errors and unsupported operand types."""

    def test_no_scalar_addition(self, a_array):
        with pytest.raises(TypeError):
            DenseMatrix.of_array(a_array) + 1.0

    def test_no_reflected_scalar_subtraction(self, a_array):
        with pytest.raises(TypeError):
            1.0 - DenseMatrix.of_array(a_array)

    def test_shape_mismatch(self, a_array):
        with pytest.raises(DimensionError):
            DenseMatrix.of_array(a_array) + DenseMatrix.zeros(2, 3)

    def test_matmul_inner_mismatch(self):
        with pytest.raises(DimensionError, match="inner"):
            DenseMatrix.zeros(2, 3) @ DenseMatrix.zeros(2, 3)

    def test_matmul_vector_wrong_size(self, a_array):
        with pytest.raises(DimensionError):
            DenseMatrix.of_array(a_array) @ DenseVector.zeros(3)

    def test_vector_matrix_wrong_size(self):
        with pytest.raises(DimensionError):
            DenseVector.zeros(3) @ DenseMatrix.zeros(2, 2)

    def test_matmul_with_ndarray(self, a_array):
        with pytest.raises(TypeError):
            DenseMatrix.of_array(a_array) @ a_array

"""
Tests for vector arithmetic through the named methods.

Validates:
    - Every representation (dense, sparse, user storage) gives the same values
    - Scalar identities: adding zero and multiplying by one copy,
      multiplying by zero clears
    - The optional result destination, including result is self
    - Dimension, element-type and divisor validation happen before any write
    - Canonical modulus, IEEE pointwise division
    - Dot products, outer product, norms and normalization
"""

import math

import numpy as np
import pytest

from pylinalg.core.exceptions import (
    DimensionError,
    DivideByZeroError,
    NotSupportedError,
    NullArgumentError,
    ValidationError,
)
from pylinalg.vector import DenseVector, SparseVector, Vector


U = np.array([1.0, -2.0, 3.0])
W = np.array([4.0, 0.5, -1.0])


# ═══════════════════════════════════════════════════════════════════════
# Addition and subtraction
# ═══════════════════════════════════════════════════════════════════════


class TestAddSubtract:
    """add / subtract / subtract_from agree with NumPy on every kind."""

    def test_add_vector(self, make_vector):
        result = make_vector(U).add(make_vector(W))
        np.testing.assert_array_equal(result.to_array(), U + W)

    def test_add_scalar(self, make_vector):
        np.testing.assert_array_equal(make_vector(U).add(2.0).to_array(), U + 2.0)

    def test_subtract_vector(self, make_vector):
        result = make_vector(U).subtract(make_vector(W))
        np.testing.assert_array_equal(result.to_array(), U - W)

    def test_subtract_from(self, make_vector):
        np.testing.assert_array_equal(make_vector(U).subtract_from(10.0).to_array(), 10.0 - U)

    def test_add_zero_is_a_copy(self, make_vector):
        v = make_vector(U)
        result = v.add(0.0)
        assert result is not v
        assert result == v

    def test_size_mismatch(self, make_vector):
        with pytest.raises(DimensionError, match="other"):
            make_vector(U).add(make_vector([1.0, 2.0]))

    def test_none_operand(self, make_vector):
        with pytest.raises(NullArgumentError):
            make_vector(U).add(None)

    def test_element_type_mismatch(self):
        a = DenseVector.of_array(U)
        b = DenseVector.of_array(W, np.float32)
        with pytest.raises(ValidationError, match="element type"):
            a.add(b)

    def test_non_vector_operand(self):
        with pytest.raises(ValidationError, match="Vector"):
            DenseVector.of_array(U).add([1.0, 2.0, 3.0])


class TestResultDestination:
    """result receives the values and is returned."""

    def test_result_is_returned(self, make_vector):
        v, w = make_vector(U), make_vector(W)
        out = DenseVector.zeros(3)
        assert v.add(w, result=out) is out
        np.testing.assert_array_equal(out.to_array(), U + W)

    def test_result_is_self(self, make_vector):
        v = make_vector(U)
        v.add(make_vector(W), result=v)
        np.testing.assert_array_equal(v.to_array(), U + W)

    def test_subtract_from_into_self(self, make_vector):
        v = make_vector(U)
        v.subtract_from(1.0, result=v)
        np.testing.assert_array_equal(v.to_array(), 1.0 - U)

    def test_wrong_result_size_leaves_it_untouched(self, make_vector):
        out = DenseVector.of_array([7.0, 7.0])
        with pytest.raises(DimensionError, match="result"):
            make_vector(U).add(make_vector(W), result=out)
        np.testing.assert_array_equal(out.to_array(), [7.0, 7.0])

    def test_multiply_by_zero_clears_result(self, make_vector):
        out = DenseVector.of_array([7.0, 7.0, 7.0])
        make_vector(U).multiply(0.0, result=out)
        np.testing.assert_array_equal(out.to_array(), [0.0, 0.0, 0.0])

    def test_multiply_by_one_copies_into_result(self, make_vector):
        out = DenseVector.zeros(3)
        make_vector(U).multiply(1.0, result=out)
        np.testing.assert_array_equal(out.to_array(), U)


# ═══════════════════════════════════════════════════════════════════════
# Scaling, division and modulus
# ═══════════════════════════════════════════════════════════════════════


class TestScaling:
    """multiply / divide / divide_by_this / negate."""

    def test_multiply(self, make_vector):
        np.testing.assert_array_equal(make_vector(U).multiply(-3.0).to_array(), -3.0 * U)

    def test_multiply_by_zero_keeps_kind(self, make_vector):
        v = make_vector(U)
        result = v.multiply(0.0)
        np.testing.assert_array_equal(result.to_array(), np.zeros(3))
        assert type(result) is type(v.create_vector(3))

    def test_divide(self, make_vector):
        np.testing.assert_allclose(make_vector(U).divide(4.0).to_array(), U / 4.0)

    def test_divide_by_zero(self, make_vector):
        with pytest.raises(DivideByZeroError, match="scalar"):
            make_vector(U).divide(0.0)

    def test_divide_by_this(self, make_vector):
        np.testing.assert_allclose(make_vector(U).divide_by_this(6.0).to_array(), 6.0 / U)

    def test_negate(self, make_vector):
        np.testing.assert_array_equal(make_vector(U).negate().to_array(), -U)

    def test_integer_scalar_accepted(self, make_vector):
        np.testing.assert_array_equal(make_vector(U).multiply(2).to_array(), 2.0 * U)

    def test_string_scalar_rejected(self, make_vector):
        with pytest.raises(ValidationError):
            make_vector(U).multiply("2")


class TestModulus:
    """Canonical modulus takes the sign of the divisor."""

    def test_modulus(self, make_vector):
        result = make_vector([-1.0, 4.0, 5.5]).modulus(3.0)
        np.testing.assert_allclose(result.to_array(), [2.0, 1.0, 2.5])

    def test_negative_divisor(self, make_vector):
        result = make_vector([1.0, -4.0]).modulus(-3.0)
        np.testing.assert_allclose(result.to_array(), [-2.0, -1.0])

    def test_modulus_by_this(self, make_vector):
        result = make_vector([3.0, -4.0]).modulus_by_this(7.0)
        np.testing.assert_allclose(result.to_array(), [1.0, -1.0])

    def test_zero_divisor(self, make_vector):
        with pytest.raises(DivideByZeroError):
            make_vector(U).modulus(0.0)

    def test_complex_rejected(self):
        v = DenseVector.of_array([1 + 1j, 2.0])
        with pytest.raises(NotSupportedError):
            v.modulus(2.0)


class TestPointwise:
    """Elementwise products, quotients and remainders."""

    def test_pointwise_multiply(self, make_vector):
        result = make_vector(U).pointwise_multiply(make_vector(W))
        np.testing.assert_array_equal(result.to_array(), U * W)

    def test_pointwise_divide(self, make_vector):
        result = make_vector(U).pointwise_divide(make_vector(W))
        np.testing.assert_allclose(result.to_array(), U / W)

    def test_pointwise_modulus(self, make_vector):
        result = make_vector([5.0, -5.0]).pointwise_modulus(make_vector([3.0, 3.0]))
        np.testing.assert_allclose(result.to_array(), [2.0, 1.0])

    def test_mixed_kinds(self):
        dense = DenseVector.of_array(U)
        sparse = SparseVector.of_array(W)
        result = sparse.pointwise_multiply(dense)
        assert isinstance(result, DenseVector)
        np.testing.assert_array_equal(result.to_array(), U * W)


# ═══════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════


class TestProducts:
    """Dot products and the outer product."""

    def test_dot_product(self, make_vector):
        assert make_vector(U).dot_product(make_vector(W)) == pytest.approx(float(U @ W))

    def test_dot_product_size_mismatch(self, make_vector):
        with pytest.raises(DimensionError):
            make_vector(U).dot_product(make_vector([1.0]))

    def test_conjugate_dot_product(self):
        a = DenseVector.of_array([1 + 2j, 3j])
        b = DenseVector.of_array([2.0 + 0j, 1 - 1j])
        assert a.conjugate_dot_product(b) == pytest.approx(np.vdot(a.to_array(), b.to_array()))

    def test_dot_product_does_not_conjugate(self):
        a = DenseVector.of_array([1j, 1.0 + 0j])
        assert a.dot_product(a) == pytest.approx(0.0)

    def test_outer_product(self, make_vector):
        m = make_vector([1.0, 2.0, 3.0]).outer_product(make_vector([1.0, 0.0, -1.0]))
        assert (m.row_count, m.column_count) == (3, 3)
        assert m[2, 2] == -3.0
        np.testing.assert_array_equal(m.to_array(), np.outer([1, 2, 3], [1, 0, -1]))

    def test_outer_product_unbound_form(self):
        u = DenseVector.of_array([1.0, 2.0])
        v = DenseVector.of_array([3.0, 4.0, 5.0])
        np.testing.assert_array_equal(Vector.outer_product(u, v).to_array(), np.outer([1, 2], [3, 4, 5]))


# ═══════════════════════════════════════════════════════════════════════
# Norms
# ═══════════════════════════════════════════════════════════════════════


class TestNorms:
    """p-norms and normalization."""

    def test_standard_norms(self, make_vector):
        v = make_vector([3.0, -4.0])
        assert v.l1_norm() == pytest.approx(7.0)
        assert v.l2_norm() == pytest.approx(5.0)
        assert v.infinity_norm() == pytest.approx(4.0)

    def test_general_p(self, make_vector):
        v = make_vector([1.0, 1.0])
        assert v.norm(3) == pytest.approx(2.0 ** (1.0 / 3.0))

    def test_p_below_one_rejected(self, make_vector):
        with pytest.raises(ValidationError, match=">= 1"):
            make_vector(U).norm(0.5)

    def test_normalize(self, make_vector):
        unit = make_vector([3.0, 4.0]).normalize(2)
        assert unit.l2_norm() == pytest.approx(1.0)
        np.testing.assert_allclose(unit.to_array(), [0.6, 0.8])

    def test_normalize_zero_vector(self, make_vector):
        with pytest.raises(DivideByZeroError):
            make_vector([0.0, 0.0]).normalize(2)

    def test_infinity_norm_of_complex(self):
        v = DenseVector.of_array([3 + 4j, 1.0])
        assert v.infinity_norm() == pytest.approx(5.0)
        assert math.isclose(v.l1_norm(), 6.0)

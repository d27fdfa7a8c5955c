"""
Operator surface for matrices.

    A + B, A - B             add / subtract
    A * s, s * A             multiply (scalar)
    A * B                    pointwise_multiply
    A @ B, A @ v             multiply (matrix, vector)
    v @ A                    left_multiply
    A / s, A / B             divide / pointwise_divide
    A % s, A % B             modulus / pointwise_modulus
    -A, +A                   negate / copy

Each operator validates its operands, applies the same scalar-identity
short-circuits as the named methods, and calls the unchecked hooks with
a freshly created result.
"""

from __future__ import annotations

from typing import Any

from pylinalg.core.exceptions import DimensionError
from pylinalg.core.scalars import is_scalar
from pylinalg.core.validation import check_count, check_nonzero_divisor, check_same_shape
from pylinalg.storage.base import MatrixStorage, VectorStorage


class MatrixOperatorsMixin:
    """Arithmetic dunder methods for Matrix."""

    def _operand_matrix(self, other: Any) -> bool:
        if isinstance(getattr(other, "storage", None), MatrixStorage):
            self._check_matrix(other, "other")
            check_same_shape(self, other, "other")
            return True
        return False

    def __pos__(self):
        return self.clone()

    def __neg__(self):
        result = self.create_matrix(self.row_count, self.column_count)
        self._do_negate(result)
        return result

    def __add__(self, other: Any):
        if self._operand_matrix(other):
            result = self._create_binary_result(other, self.row_count, self.column_count)
            self._do_add(other, result)
            return result
        return NotImplemented

    def __sub__(self, other: Any):
        if self._operand_matrix(other):
            result = self._create_binary_result(other, self.row_count, self.column_count)
            self._do_subtract(other, result)
            return result
        return NotImplemented

    def __mul__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            if self.ops.is_one(scalar):
                return self.clone()
            result = self.create_matrix(self.row_count, self.column_count)
            if not self.ops.is_zero(scalar):
                self._do_multiply_scalar(scalar, result)
            return result
        if self._operand_matrix(other):
            result = self._create_binary_result(other, self.row_count, self.column_count)
            self._do_pointwise_multiply(other, result)
            return result
        return NotImplemented

    def __rmul__(self, other: Any):
        if is_scalar(other):
            return self.__mul__(other)
        return NotImplemented

    def __matmul__(self, other: Any):
        storage = getattr(other, "storage", None)
        if isinstance(storage, VectorStorage):
            self._check_vector(other, "other")
            check_count(other, self.column_count, "other")
            result = self.create_vector(self.row_count)
            self._do_multiply_vector(other, result)
            return result
        if isinstance(storage, MatrixStorage):
            self._check_matrix(other, "other")
            if self.column_count != other.row_count:
                raise DimensionError(
                    f"other: inner dimensions do not match ({self.column_count} vs {other.row_count})",
                    name="other", expected=self.column_count, actual=other.row_count,
                )
            result = self._create_binary_result(other, self.row_count, other.column_count)
            self._do_multiply_matrix(other, result)
            return result
        return NotImplemented

    def __rmatmul__(self, other: Any):
        if isinstance(getattr(other, "storage", None), VectorStorage):
            self._check_vector(other, "other")
            check_count(other, self.row_count, "other")
            result = self.create_vector(self.column_count)
            self._do_left_multiply(other, result)
            return result
        return NotImplemented

    def __truediv__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            check_nonzero_divisor(self.ops, scalar, "scalar")
            if self.ops.is_one(scalar):
                return self.clone()
            result = self.create_matrix(self.row_count, self.column_count)
            self._do_divide_scalar(scalar, result)
            return result
        if self._operand_matrix(other):
            result = self._create_binary_result(other, self.row_count, self.column_count)
            self._do_pointwise_divide(other, result)
            return result
        return NotImplemented

    def __mod__(self, other: Any):
        if is_scalar(other):
            divisor = self.ops.coerce(other, "divisor")
            self.ops.require_ordered("modulus")
            check_nonzero_divisor(self.ops, divisor, "divisor")
            result = self.create_matrix(self.row_count, self.column_count)
            self._do_modulus(divisor, result)
            return result
        if self._operand_matrix(other):
            self.ops.require_ordered("pointwise_modulus")
            result = self._create_binary_result(other, self.row_count, self.column_count)
            self._do_pointwise_modulus(other, result)
            return result
        return NotImplemented

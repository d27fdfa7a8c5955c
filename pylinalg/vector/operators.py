"""
Operator surface for vectors.

Python operators are a second entry point next to the named methods.
They carry their own scalar-identity short-circuits and call the
unchecked hooks directly; the test suite checks that both surfaces agree.

    v + s, s + v, v + w      add
    v - s, s - v, v - w      subtract / subtract_from
    v * s, s * v, v * w      multiply / pointwise_multiply
    v / s, s / v, v / w      divide / divide_by_this / pointwise_divide
    v % s, s % v, v % w      modulus / modulus_by_this / pointwise_modulus
    v @ w                    dot_product
    -v, +v                   negate / copy

Operands of any other type return NotImplemented, so a Matrix on the
right of ``v @ M`` gets to handle the product itself.
"""

from __future__ import annotations

from typing import Any

from pylinalg.core.scalars import is_scalar
from pylinalg.core.validation import check_nonzero_divisor
from pylinalg.storage.base import VectorStorage


class VectorOperatorsMixin:
    """Arithmetic dunder methods for Vector."""

    def _operand_vector(self, other: Any) -> bool:
        if isinstance(getattr(other, "storage", None), VectorStorage):
            self._check_operand(other, "other")
            return True
        return False

    def __pos__(self):
        return self.clone()

    def __neg__(self):
        result = self.create_vector(self.count)
        self._do_negate(result)
        return result

    def __add__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            if self.ops.is_zero(scalar):
                return self.clone()
            result = self.create_vector(self.count)
            self._do_add_scalar(scalar, result)
            return result
        if self._operand_vector(other):
            result = self._create_binary_result(other)
            self._do_add(other, result)
            return result
        return NotImplemented

    def __radd__(self, other: Any):
        if is_scalar(other):
            return self.__add__(other)
        return NotImplemented

    def __sub__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            if self.ops.is_zero(scalar):
                return self.clone()
            result = self.create_vector(self.count)
            self._do_subtract_scalar(scalar, result)
            return result
        if self._operand_vector(other):
            result = self._create_binary_result(other)
            self._do_subtract(other, result)
            return result
        return NotImplemented

    def __rsub__(self, other: Any):
        if is_scalar(other):
            result = self.create_vector(self.count)
            self._do_subtract_from(self.ops.coerce(other), result)
            return result
        return NotImplemented

    def __mul__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            if self.ops.is_one(scalar):
                return self.clone()
            result = self.create_vector(self.count)
            if not self.ops.is_zero(scalar):
                self._do_multiply(scalar, result)
            return result
        if self._operand_vector(other):
            result = self._create_binary_result(other)
            self._do_pointwise_multiply(other, result)
            return result
        return NotImplemented

    def __rmul__(self, other: Any):
        if is_scalar(other):
            return self.__mul__(other)
        return NotImplemented

    def __truediv__(self, other: Any):
        if is_scalar(other):
            scalar = self.ops.coerce(other)
            check_nonzero_divisor(self.ops, scalar, "scalar")
            if self.ops.is_one(scalar):
                return self.clone()
            result = self.create_vector(self.count)
            self._do_divide(scalar, result)
            return result
        if self._operand_vector(other):
            result = self._create_binary_result(other)
            self._do_pointwise_divide(other, result)
            return result
        return NotImplemented

    def __rtruediv__(self, other: Any):
        if is_scalar(other):
            result = self.create_vector(self.count)
            self._do_divide_by_this(self.ops.coerce(other), result)
            return result
        return NotImplemented

    def __mod__(self, other: Any):
        if is_scalar(other):
            divisor = self.ops.coerce(other, "divisor")
            self.ops.require_ordered("modulus")
            check_nonzero_divisor(self.ops, divisor, "divisor")
            result = self.create_vector(self.count)
            self._do_modulus(divisor, result)
            return result
        if self._operand_vector(other):
            self.ops.require_ordered("pointwise_modulus")
            result = self._create_binary_result(other)
            self._do_pointwise_modulus(other, result)
            return result
        return NotImplemented

    def __rmod__(self, other: Any):
        if is_scalar(other):
            self.ops.require_ordered("modulus_by_this")
            result = self.create_vector(self.count)
            self._do_modulus_by_this(self.ops.coerce(other, "dividend"), result)
            return result
        return NotImplemented

    def __matmul__(self, other: Any):
        if self._operand_vector(other):
            return self._do_dot_product(other)
        return NotImplemented

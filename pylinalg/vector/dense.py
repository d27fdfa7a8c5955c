"""
Dense vectors backed by a NumPy buffer.

Hooks take a vectorized NumPy path when every participant is dense and
fall back to the element loops of the base class otherwise.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.providers import get_provider
from pylinalg.storage.dense import DenseVectorStorage
from pylinalg.vector.base import Vector


class DenseVector(Vector):
    """Vector whose storage is a DenseVectorStorage."""

    def __init__(self, storage: DenseVectorStorage):
        super().__init__(storage)
        if not isinstance(storage, DenseVectorStorage):
            raise ValidationError(
                f"storage: expected a DenseVectorStorage, got {type(storage).__name__}"
            )

    @classmethod
    def zeros(cls, size: int, dtype: ScalarOps | Any = np.float64) -> DenseVector:
        return cls(DenseVectorStorage(size, scalar_ops_for(dtype)))

    @classmethod
    def of_array(cls, array: ArrayLike, dtype: ScalarOps | Any = None) -> DenseVector:
        """Copy a 1-D array-like."""
        return cls(DenseVectorStorage.of_array(array, dtype))

    @property
    def data(self) -> NDArray[Any]:
        """The underlying buffer (by reference)."""
        return self.storage.data

    def create_vector(self, size: int, fully_mutable: bool = False) -> DenseVector:
        return DenseVector(DenseVectorStorage(size, self.ops))

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False):
        from pylinalg.matrix.dense import DenseMatrix

        return DenseMatrix.zeros(rows, columns, self.ops)

    # ------------------------------------------------------------------
    # Vectorized hooks
    # ------------------------------------------------------------------

    def _unary(self, result: Vector, ufunc, *args) -> bool:
        if not isinstance(result, DenseVector):
            return False
        with np.errstate(divide='ignore', invalid='ignore'):
            ufunc(*args, out=result.data)
        return True

    def _do_add_scalar(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.add, self.data, scalar):
            super()._do_add_scalar(scalar, result)

    def _do_subtract_scalar(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.subtract, self.data, scalar):
            super()._do_subtract_scalar(scalar, result)

    def _do_subtract_from(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.subtract, scalar, self.data):
            super()._do_subtract_from(scalar, result)

    def _do_negate(self, result: Vector) -> None:
        if not self._unary(result, np.negative, self.data):
            super()._do_negate(result)

    def _do_conjugate(self, result: Vector) -> None:
        if not self._unary(result, np.conjugate, self.data):
            super()._do_conjugate(result)

    def _do_multiply(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.multiply, self.data, scalar):
            super()._do_multiply(scalar, result)

    def _do_divide(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.divide, self.data, scalar):
            super()._do_divide(scalar, result)

    def _do_divide_by_this(self, scalar: Any, result: Vector) -> None:
        if not self._unary(result, np.divide, scalar, self.data):
            super()._do_divide_by_this(scalar, result)

    def _do_modulus(self, divisor: Any, result: Vector) -> None:
        if not self._unary(result, np.mod, self.data, divisor):
            super()._do_modulus(divisor, result)

    def _do_modulus_by_this(self, dividend: Any, result: Vector) -> None:
        if not self._unary(result, np.mod, dividend, self.data):
            super()._do_modulus_by_this(dividend, result)

    def _binary(self, other: Vector, result: Vector, ufunc) -> bool:
        if not isinstance(other, DenseVector):
            return False
        return self._unary(result, ufunc, self.data, other.data)

    def _do_add(self, other: Vector, result: Vector) -> None:
        if not self._binary(other, result, np.add):
            super()._do_add(other, result)

    def _do_subtract(self, other: Vector, result: Vector) -> None:
        if not self._binary(other, result, np.subtract):
            super()._do_subtract(other, result)

    def _do_pointwise_multiply(self, other: Vector, result: Vector) -> None:
        if not self._binary(other, result, np.multiply):
            super()._do_pointwise_multiply(other, result)

    def _do_pointwise_divide(self, other: Vector, result: Vector) -> None:
        if not self._binary(other, result, np.divide):
            super()._do_pointwise_divide(other, result)

    def _do_pointwise_modulus(self, other: Vector, result: Vector) -> None:
        if not self._binary(other, result, np.mod):
            super()._do_pointwise_modulus(other, result)

    def _do_dot_product(self, other: Vector) -> Any:
        if isinstance(other, DenseVector):
            return self.ops.dtype.type(get_provider().dot_product(self.data, other.data))
        return super()._do_dot_product(other)

    def _do_conjugate_dot_product(self, other: Vector) -> Any:
        if isinstance(other, DenseVector):
            return self.ops.dtype.type(np.vdot(self.data, other.data))
        return super()._do_conjugate_dot_product(other)

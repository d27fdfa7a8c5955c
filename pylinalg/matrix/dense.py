"""
Dense column-major matrices.

Hooks run as NumPy ufuncs on the flat buffers when every participant is
dense; products go through the active linear-algebra provider. Any other
combination falls back to the element loops of the base class.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.matrix.base import Matrix
from pylinalg.providers import get_provider
from pylinalg.storage.dense import DenseColumnMajorMatrixStorage, DenseVectorStorage
from pylinalg.vector.base import Vector
from pylinalg.vector.dense import DenseVector


class DenseMatrix(Matrix):
    """Matrix whose storage is a DenseColumnMajorMatrixStorage."""

    def __init__(self, storage: DenseColumnMajorMatrixStorage):
        super().__init__(storage)
        if not isinstance(storage, DenseColumnMajorMatrixStorage):
            raise ValidationError(
                f"storage: expected a DenseColumnMajorMatrixStorage, got {type(storage).__name__}"
            )

    @classmethod
    def zeros(cls, rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> DenseMatrix:
        return cls(DenseColumnMajorMatrixStorage(rows, columns, scalar_ops_for(dtype)))

    @classmethod
    def of_array(cls, array: ArrayLike, dtype: ScalarOps | Any = None) -> DenseMatrix:
        """Copy a 2-D array-like."""
        return cls(DenseColumnMajorMatrixStorage.of_array(array, dtype))

    @property
    def data(self) -> NDArray[Any]:
        """The flat column-major buffer (by reference)."""
        return self.storage.data

    def as_array(self) -> NDArray[Any]:
        """(row_count, column_count) view of the buffer; writes go through."""
        return self.storage.as_array()

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> DenseMatrix:
        return DenseMatrix(DenseColumnMajorMatrixStorage(rows, columns, self.ops))

    def create_vector(self, size: int, fully_mutable: bool = False) -> DenseVector:
        return DenseVector(DenseVectorStorage(size, self.ops))

    # ------------------------------------------------------------------
    # Vectorized hooks
    # ------------------------------------------------------------------

    def _unary(self, result: Matrix, ufunc, *args) -> bool:
        if not isinstance(result.storage, DenseColumnMajorMatrixStorage):
            return False
        with np.errstate(divide='ignore', invalid='ignore'):
            ufunc(*args, out=result.storage.data)
        return True

    def _binary(self, other: Matrix, result: Matrix, ufunc) -> bool:
        if not isinstance(other.storage, DenseColumnMajorMatrixStorage):
            return False
        return self._unary(result, ufunc, self.data, other.storage.data)

    def _do_add(self, other: Matrix, result: Matrix) -> None:
        if not self._binary(other, result, np.add):
            super()._do_add(other, result)

    def _do_subtract(self, other: Matrix, result: Matrix) -> None:
        if not self._binary(other, result, np.subtract):
            super()._do_subtract(other, result)

    def _do_multiply_scalar(self, scalar: Any, result: Matrix) -> None:
        if not self._unary(result, np.multiply, self.data, scalar):
            super()._do_multiply_scalar(scalar, result)

    def _do_divide_scalar(self, scalar: Any, result: Matrix) -> None:
        if not self._unary(result, np.divide, self.data, scalar):
            super()._do_divide_scalar(scalar, result)

    def _do_modulus(self, divisor: Any, result: Matrix) -> None:
        if not self._unary(result, np.mod, self.data, divisor):
            super()._do_modulus(divisor, result)

    def _do_negate(self, result: Matrix) -> None:
        if not self._unary(result, np.negative, self.data):
            super()._do_negate(result)

    def _do_conjugate(self, result: Matrix) -> None:
        if not self._unary(result, np.conjugate, self.data):
            super()._do_conjugate(result)

    def _do_pointwise_multiply(self, other: Matrix, result: Matrix) -> None:
        if not self._binary(other, result, np.multiply):
            super()._do_pointwise_multiply(other, result)

    def _do_pointwise_divide(self, other: Matrix, result: Matrix) -> None:
        if not self._binary(other, result, np.divide):
            super()._do_pointwise_divide(other, result)

    def _do_pointwise_modulus(self, other: Matrix, result: Matrix) -> None:
        if not self._binary(other, result, np.mod):
            super()._do_pointwise_modulus(other, result)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def _gemm(self, transpose_a: bool, other: DenseMatrix, transpose_b: bool, result: Matrix) -> bool:
        if not (isinstance(other, DenseMatrix) and isinstance(result.storage, DenseColumnMajorMatrixStorage)):
            return False
        get_provider().matrix_multiply(
            transpose_a, transpose_b, self.ops.one,
            self.data, self.row_count, self.column_count,
            other.data, other.row_count, other.column_count,
            self.ops.zero, result.storage.data,
        )
        return True

    def _do_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        if not self._gemm(False, other, False, result):
            super()._do_multiply_matrix(other, result)

    def _do_transpose_and_multiply(self, other: Matrix, result: Matrix) -> None:
        if not self._gemm(False, other, True, result):
            super()._do_transpose_and_multiply(other, result)

    def _do_transpose_this_and_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        if not self._gemm(True, other, False, result):
            super()._do_transpose_this_and_multiply_matrix(other, result)

    def _gemv(self, transpose_a: bool, vector: Vector, result: Vector) -> bool:
        if not (isinstance(vector.storage, DenseVectorStorage)
                and isinstance(result.storage, DenseVectorStorage)):
            return False
        get_provider().matrix_multiply(
            transpose_a, False, self.ops.one,
            self.data, self.row_count, self.column_count,
            vector.storage.data, vector.count, 1,
            self.ops.zero, result.storage.data,
        )
        return True

    def _do_multiply_vector(self, vector: Vector, result: Vector) -> None:
        if not self._gemv(False, vector, result):
            super()._do_multiply_vector(vector, result)

    def _do_transpose_this_and_multiply_vector(self, vector: Vector, result: Vector) -> None:
        if not self._gemv(True, vector, result):
            super()._do_transpose_this_and_multiply_vector(vector, result)

    # ------------------------------------------------------------------
    # Structural fast paths
    # ------------------------------------------------------------------

    def _swap_rows(self, a: int, b: int) -> None:
        view = self.as_array()
        view[[a, b], :] = view[[b, a], :]

    def _swap_columns(self, a: int, b: int) -> None:
        view = self.as_array()
        view[:, [a, b]] = view[:, [b, a]]

    def trace(self) -> Any:
        if self.row_count == self.column_count:
            return self.ops.dtype.type(np.trace(self.as_array()))
        return super().trace()

    def is_symmetric(self) -> bool:
        if self.row_count != self.column_count:
            return False
        view = self.as_array()
        return bool(np.array_equal(view, view.T))

"""
Diagonal matrices.

Only the main diagonal is stored. Operations whose result stays
diagonal (scaling, diagonal sums and products, inversion) keep a
diagonal result; anything that can fill the off-diagonal (kronecker,
append, sub-matrices, sums with a general matrix) gets a sparse result
from the factory instead. Rows and columns cannot be permuted in place.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.exceptions import SingularMatrixError, ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.core.validation import check_dimension, check_square
from pylinalg.matrix.base import Matrix
from pylinalg.matrix.sparse import SparseMatrix
from pylinalg.storage.dense import DenseVectorStorage
from pylinalg.storage.diagonal import DiagonalMatrixStorage
from pylinalg.storage.sparse import SparseMatrixStorage
from pylinalg.vector.base import Vector
from pylinalg.vector.dense import DenseVector


class DiagonalMatrix(Matrix):
    """Matrix whose storage is a DiagonalMatrixStorage."""

    def __init__(self, storage: DiagonalMatrixStorage):
        super().__init__(storage)
        if not isinstance(storage, DiagonalMatrixStorage):
            raise ValidationError(
                f"storage: expected a DiagonalMatrixStorage, got {type(storage).__name__}"
            )

    @classmethod
    def zeros(cls, rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> DiagonalMatrix:
        return cls(DiagonalMatrixStorage(rows, columns, scalar_ops_for(dtype)))

    @classmethod
    def of_diagonal(cls, values: ArrayLike, rows: int | None = None, columns: int | None = None,
                    dtype: ScalarOps | Any = None) -> DiagonalMatrix:
        """
        Diagonal matrix holding a copy of values on its diagonal.

        The shape defaults to square; values must have min(rows, columns) entries.
        """
        array = np.asarray(values)
        if array.ndim != 1:
            raise ValidationError(f"values: expected 1-D input, got shape {array.shape}")
        ops = scalar_ops_for(array.dtype if dtype is None else dtype)
        if not ops.is_complex and np.iscomplexobj(array):
            raise ValidationError(f"values: complex data cannot be stored as {ops.name}")
        rows = array.shape[0] if rows is None else rows
        columns = rows if columns is None else columns
        return cls(DiagonalMatrixStorage(rows, columns, ops, np.array(array, dtype=ops.dtype)))

    @classmethod
    def identity(cls, order: int, dtype: ScalarOps | Any = np.float64) -> DiagonalMatrix:
        order = check_dimension(order, "order")
        ops = scalar_ops_for(dtype)
        return cls(DiagonalMatrixStorage(order, order, ops, np.ones(order, dtype=ops.dtype)))

    @property
    def data(self) -> NDArray[Any]:
        """The diagonal buffer (by reference)."""
        return self.storage.data

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> Matrix:
        if fully_mutable:
            return SparseMatrix(SparseMatrixStorage(rows, columns, self.ops))
        return DiagonalMatrix(DiagonalMatrixStorage(rows, columns, self.ops))

    def create_vector(self, size: int, fully_mutable: bool = False) -> DenseVector:
        return DenseVector(DenseVectorStorage(size, self.ops))

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _diagonal_of(self, other: Matrix) -> NDArray[Any]:
        if isinstance(other, DiagonalMatrix):
            return other.data
        at = other.storage.at
        return np.array([at(i, i) for i in range(self.data.shape[0])], dtype=self.ops.dtype)

    def _unary(self, result: Matrix, ufunc, *args) -> bool:
        if not isinstance(result, DiagonalMatrix):
            return False
        with np.errstate(divide='ignore', invalid='ignore'):
            ufunc(*args, out=result.data)
        return True

    def _do_add(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, DiagonalMatrix) and self._unary(result, np.add, self.data, other.data):
            return
        if not result.storage.is_fully_mutable:
            super()._do_add(other, result)
            return
        diagonal = self.data + self._diagonal_of(other)
        if result is not other:
            other.storage.copy_to(result.storage)
        for i, value in enumerate(diagonal):
            result.storage.set_at(i, i, value)

    def _do_subtract(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, DiagonalMatrix) and self._unary(result, np.subtract, self.data, other.data):
            return
        if not result.storage.is_fully_mutable:
            super()._do_subtract(other, result)
            return
        diagonal = self.data - self._diagonal_of(other)
        other._do_negate(result)
        for i, value in enumerate(diagonal):
            result.storage.set_at(i, i, value)

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
        diagonal = self.data * self._diagonal_of(other)
        if isinstance(result, DiagonalMatrix):
            result.data[:] = diagonal
            return
        result.storage.clear()
        for i, value in enumerate(diagonal):
            result.storage.set_at(i, i, value)

    def _do_pointwise_divide(self, other: Matrix, result: Matrix) -> None:
        # off-diagonal 0/0 stays zero between two diagonal matrices
        if isinstance(other, DiagonalMatrix) and self._unary(result, np.divide, self.data, other.data):
            return
        super()._do_pointwise_divide(other, result)

    def _do_pointwise_modulus(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, DiagonalMatrix) and self._unary(result, np.mod, self.data, other.data):
            return
        super()._do_pointwise_modulus(other, result)

    def _scaled_rows(self, array: NDArray[Any], rows: int) -> NDArray[Any]:
        """diag(data) padded to `rows` rows, applied to the leading rows of array."""
        k = self.data.shape[0]
        out = np.zeros((rows,) + array.shape[1:], dtype=np.result_type(self.data, array))
        if array.ndim == 1:
            out[:k] = self.data * array[:k]
        else:
            out[:k, :] = self.data[:, None] * array[:k, :]
        return out

    def _do_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self._scaled_rows(vector.to_array(), self.row_count))

    def _do_transpose_this_and_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self._scaled_rows(vector.to_array(), self.column_count))

    def _do_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self._scaled_rows(other.to_array(), self.row_count))

    def _do_transpose_and_multiply(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self._scaled_rows(other.to_array().T, self.row_count))

    def _do_transpose_this_and_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self._scaled_rows(other.to_array(), self.column_count))

    # ------------------------------------------------------------------
    # Derived quantities read off the diagonal
    # ------------------------------------------------------------------

    def trace(self) -> Any:
        check_square(self, "matrix")
        return self.ops.dtype.type(np.sum(self.data))

    def determinant(self) -> Any:
        check_square(self, "matrix")
        return self.ops.dtype.type(np.prod(self.data))

    def inverse(self) -> DiagonalMatrix:
        """
        Diagonal of reciprocals.

        Raises:
            NotSquareError: If the matrix is not square
            SingularMatrixError: If a diagonal element is zero
        """
        check_square(self, "matrix")
        zero = np.flatnonzero(self.data == 0)
        if zero.size:
            raise SingularMatrixError(
                f"matrix: singular, zero diagonal element at index {int(zero[0])}",
                matrix_name="matrix",
                pivot_index=int(zero[0]),
            )
        return DiagonalMatrix(DiagonalMatrixStorage(
            self.row_count, self.column_count, self.ops, (1 / self.data).astype(self.ops.dtype)
        ))

    def rank(self) -> int:
        return int(np.count_nonzero(self.data))

    def condition_number(self) -> float:
        magnitudes = np.abs(self.data)
        smallest = magnitudes.min()
        if smallest == 0:
            return float('inf')
        return float(magnitudes.max() / smallest)

    def l1_norm(self) -> float:
        return float(np.abs(self.data).max())

    def l2_norm(self) -> float:
        return float(np.abs(self.data).max())

    def infinity_norm(self) -> float:
        return float(np.abs(self.data).max())

    def frobenius_norm(self) -> float:
        magnitudes = np.abs(self.data)
        return math.sqrt(float(np.sum(magnitudes * magnitudes)))

    def is_symmetric(self) -> bool:
        return self.row_count == self.column_count

    def diagonal(self) -> Vector:
        return DenseVector(DenseVectorStorage(self.data.shape[0], self.ops, self.data.copy()))

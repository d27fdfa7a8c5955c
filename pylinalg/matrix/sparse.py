"""
Sparse matrices with row dictionaries of non-zero elements.

Zero-preserving maps visit the stored entries only. Products are
delegated to scipy.sparse and written back through the result storage.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import scipy.sparse as sp
from numpy.typing import ArrayLike

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.matrix.base import Matrix
from pylinalg.storage.sparse import SparseMatrixStorage, SparseVectorStorage
from pylinalg.vector.base import Vector
from pylinalg.vector.sparse import SparseVector


class SparseMatrix(Matrix):
    """Matrix whose storage is a SparseMatrixStorage."""

    def __init__(self, storage: SparseMatrixStorage):
        super().__init__(storage)
        if not isinstance(storage, SparseMatrixStorage):
            raise ValidationError(
                f"storage: expected a SparseMatrixStorage, got {type(storage).__name__}"
            )

    @classmethod
    def zeros(cls, rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> SparseMatrix:
        return cls(SparseMatrixStorage(rows, columns, scalar_ops_for(dtype)))

    @classmethod
    def of_array(cls, array: ArrayLike, dtype: ScalarOps | Any = None) -> SparseMatrix:
        """Copy the non-zeros of a 2-D array-like or scipy.sparse matrix."""
        if sp.issparse(array):
            return cls(SparseMatrixStorage.from_scipy(array, dtype))
        values = np.asarray(array)
        if values.ndim != 2:
            raise ValidationError(f"array: expected 2-D input, got shape {values.shape}")
        if dtype is not None and not scalar_ops_for(dtype).is_complex and np.iscomplexobj(values):
            raise ValidationError(f"array: complex data cannot be stored as {scalar_ops_for(dtype).name}")
        return cls(SparseMatrixStorage.from_scipy(sp.coo_array(values), dtype))

    @property
    def non_zeros_count(self) -> int:
        return self.storage.non_zeros_count

    def to_scipy(self) -> sp.csr_array:
        return self.storage.to_scipy()

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> SparseMatrix:
        return SparseMatrix(SparseMatrixStorage(rows, columns, self.ops))

    def create_vector(self, size: int, fully_mutable: bool = False) -> SparseVector:
        return SparseVector(SparseVectorStorage(size, self.ops))

    # ------------------------------------------------------------------
    # Zero-preserving hooks
    # ------------------------------------------------------------------

    def _map_nonzeros(self, result: Matrix, f) -> bool:
        """Apply a zero-preserving f(row, column, value) to the stored entries."""
        if not isinstance(result, SparseMatrix):
            return False
        entries = [(i, j, f(i, j, v)) for i, j, v in self.storage.enumerate_nonzero_indexed()]
        if result.storage is not self.storage:
            result.storage.clear()
        for i, j, value in entries:
            result.storage.set_at(i, j, value)
        return True

    def _do_multiply_scalar(self, scalar: Any, result: Matrix) -> None:
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.multiply(x, scalar)):
            super()._do_multiply_scalar(scalar, result)

    def _do_divide_scalar(self, scalar: Any, result: Matrix) -> None:
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.divide(x, scalar)):
            super()._do_divide_scalar(scalar, result)

    def _do_negate(self, result: Matrix) -> None:
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.negate(x)):
            super()._do_negate(result)

    def _do_conjugate(self, result: Matrix) -> None:
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.conjugate(x)):
            super()._do_conjugate(result)

    def _do_modulus(self, divisor: Any, result: Matrix) -> None:
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.modulus(x, divisor)):
            super()._do_modulus(divisor, result)

    def _do_pointwise_multiply(self, other: Matrix, result: Matrix) -> None:
        source = other.storage
        if not self._map_nonzeros(result, lambda i, j, x: self.ops.multiply(x, source.at(i, j))):
            super()._do_pointwise_multiply(other, result)

    def _do_add(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, SparseMatrix) and isinstance(result, SparseMatrix):
            result.storage.set_from_array((self.to_scipy() + other.to_scipy()).toarray())
        else:
            super()._do_add(other, result)

    def _do_subtract(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, SparseMatrix) and isinstance(result, SparseMatrix):
            result.storage.set_from_array((self.to_scipy() - other.to_scipy()).toarray())
        else:
            super()._do_subtract(other, result)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def _do_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        if isinstance(other, SparseMatrix) and isinstance(result, SparseMatrix):
            product = self.to_scipy() @ other.to_scipy()
            result.storage.set_from_array(product.toarray())
        else:
            result.storage.set_from_array(self.to_scipy() @ other.to_array())

    def _do_transpose_and_multiply(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self.to_scipy() @ other.to_array().T)

    def _do_transpose_this_and_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self.to_scipy().T @ other.to_array())

    def _do_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self.to_scipy() @ vector.to_array())

    def _do_transpose_this_and_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self.to_scipy().T @ vector.to_array())

    # ------------------------------------------------------------------
    # Structural fast paths
    # ------------------------------------------------------------------

    def _swap_rows(self, a: int, b: int) -> None:
        rows = self.storage.rows
        rows[a], rows[b] = rows[b], rows[a]

    def is_symmetric(self) -> bool:
        if self.row_count != self.column_count:
            return False
        at = self.storage.at
        return all(at(j, i) == v for i, j, v in self.storage.enumerate_nonzero_indexed())

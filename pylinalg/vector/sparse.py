"""
Sparse vectors keeping only non-zero elements.

Operations that map zero to zero (scaling, negation, conjugation,
pointwise multiplication, dot products) visit only the stored entries.
Everything else uses the element loops of the base class.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.storage.sparse import SparseVectorStorage
from pylinalg.vector.base import Vector


class SparseVector(Vector):
    """Vector whose storage is a SparseVectorStorage."""

    def __init__(self, storage: SparseVectorStorage):
        super().__init__(storage)
        if not isinstance(storage, SparseVectorStorage):
            raise ValidationError(
                f"storage: expected a SparseVectorStorage, got {type(storage).__name__}"
            )

    @classmethod
    def zeros(cls, size: int, dtype: ScalarOps | Any = np.float64) -> SparseVector:
        return cls(SparseVectorStorage(size, scalar_ops_for(dtype)))

    @classmethod
    def of_array(cls, array: ArrayLike, dtype: ScalarOps | Any = None) -> SparseVector:
        """Copy the non-zeros of a 1-D array-like."""
        values = np.asarray(array)
        ops = scalar_ops_for(values.dtype if dtype is None else dtype)
        vector = cls.zeros(len(values), ops)
        vector.set_values(values)
        return vector

    @property
    def non_zeros_count(self) -> int:
        return self.storage.non_zeros_count

    def create_vector(self, size: int, fully_mutable: bool = False) -> SparseVector:
        return SparseVector(SparseVectorStorage(size, self.ops))

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False):
        from pylinalg.matrix.sparse import SparseMatrix

        return SparseMatrix.zeros(rows, columns, self.ops)

    def _map_nonzeros(self, result: Vector, f) -> bool:
        return self._map_nonzeros_indexed(result, lambda i, x: f(x))

    def _do_multiply(self, scalar: Any, result: Vector) -> None:
        if not self._map_nonzeros(result, lambda x: self.ops.multiply(x, scalar)):
            super()._do_multiply(scalar, result)

    def _do_divide(self, scalar: Any, result: Vector) -> None:
        if not self._map_nonzeros(result, lambda x: self.ops.divide(x, scalar)):
            super()._do_divide(scalar, result)

    def _do_negate(self, result: Vector) -> None:
        if not self._map_nonzeros(result, self.ops.negate):
            super()._do_negate(result)

    def _do_conjugate(self, result: Vector) -> None:
        if not self._map_nonzeros(result, self.ops.conjugate):
            super()._do_conjugate(result)

    def _do_pointwise_multiply(self, other: Vector, result: Vector) -> None:
        source = other.storage
        if not self._map_nonzeros_indexed(result, lambda i, x: self.ops.multiply(x, source.at(i))):
            super()._do_pointwise_multiply(other, result)

    def _map_nonzeros_indexed(self, result: Vector, f) -> bool:
        """Apply a zero-preserving f(index, value) to the stored entries only."""
        if not isinstance(result, SparseVector):
            return False
        entries = [(i, f(i, v)) for i, v in self.storage.values.items()]
        if result.storage is not self.storage:
            result.storage.clear()
        for i, value in entries:
            result.storage.set_at(i, value)
        return True

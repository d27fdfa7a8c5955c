"""
Vector over any user-supplied VectorStorage.

All arithmetic runs through the element-loop hooks of the base class, so
a storage only needs at() and set_at(). New vectors requested through
the factory are dense.
"""

from __future__ import annotations

from pylinalg.storage.dense import DenseVectorStorage
from pylinalg.vector.base import Vector
from pylinalg.vector.dense import DenseVector


class GenericVector(Vector):
    """Vector wrapping an arbitrary VectorStorage."""

    def create_vector(self, size: int, fully_mutable: bool = False) -> DenseVector:
        return DenseVector(DenseVectorStorage(size, self.ops))

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False):
        from pylinalg.matrix.dense import DenseMatrix

        return DenseMatrix.zeros(rows, columns, self.ops)

"""
Matrix over any user-supplied MatrixStorage.

All arithmetic runs through the element-loop hooks of the base class, so
a storage only needs at() and set_at(). New matrices and vectors
requested through the factory are dense.
"""

from __future__ import annotations

from pylinalg.matrix.base import Matrix
from pylinalg.matrix.dense import DenseMatrix
from pylinalg.storage.dense import DenseColumnMajorMatrixStorage, DenseVectorStorage
from pylinalg.vector.dense import DenseVector


class GenericMatrix(Matrix):
    """Matrix wrapping an arbitrary MatrixStorage."""

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> DenseMatrix:
        return DenseMatrix(DenseColumnMajorMatrixStorage(rows, columns, self.ops))

    def create_vector(self, size: int, fully_mutable: bool = False) -> DenseVector:
        return DenseVector(DenseVectorStorage(size, self.ops))

"""
Square dense matrices.

A DenseMatrix whose shape is checked once at construction. Results of
square shape stay SquareMatrix; anything else falls back to DenseMatrix.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.core.validation import check_dimension, check_square
from pylinalg.matrix.dense import DenseMatrix
from pylinalg.storage.dense import DenseColumnMajorMatrixStorage


class SquareMatrix(DenseMatrix):
    """
    Dense n x n matrix.

    Raises:
        NotSquareError: If the storage is not square
    """

    def __init__(self, storage: DenseColumnMajorMatrixStorage):
        super().__init__(storage)
        check_square(self, "storage")

    @classmethod
    def zeros(cls, rows: int, columns: int | None = None,
              dtype: ScalarOps | Any = np.float64) -> SquareMatrix:
        columns = rows if columns is None else columns
        return cls(DenseColumnMajorMatrixStorage(rows, columns, scalar_ops_for(dtype)))

    @classmethod
    def identity(cls, order: int, dtype: ScalarOps | Any = np.float64) -> SquareMatrix:
        order = check_dimension(order, "order")
        matrix = cls.zeros(order, order, dtype)
        matrix.as_array()[np.diag_indices(order)] = 1
        return matrix

    @classmethod
    def of_array(cls, array: ArrayLike, dtype: ScalarOps | Any = None) -> SquareMatrix:
        return cls(DenseColumnMajorMatrixStorage.of_array(array, dtype))

    @property
    def order(self) -> int:
        return self.row_count

    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> DenseMatrix:
        storage = DenseColumnMajorMatrixStorage(rows, columns, self.ops)
        if rows == columns:
            return SquareMatrix(storage)
        return DenseMatrix(storage)

"""
Factory functions for matrices and vectors.

One place to construct every built-in kind without importing the
concrete classes. Every function takes an optional dtype; when it is
omitted, the element type follows the input data (integers promote to
float64) or defaults to float64.

Example:
    >>> from pylinalg import builder
    >>> a = builder.dense_of_array([[2.0, 0.0], [1.0, 3.0]])
    >>> i = builder.dense_identity(2)
    >>> (a @ i) == a
    True
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.exceptions import ValidationError
from pylinalg.core.protocols import Distribution
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.core.validation import check_dimension, check_not_none
from pylinalg.matrix.base import Matrix
from pylinalg.matrix.dense import DenseMatrix
from pylinalg.matrix.diagonal import DiagonalMatrix
from pylinalg.matrix.generic import GenericMatrix
from pylinalg.matrix.sparse import SparseMatrix
from pylinalg.matrix.square import SquareMatrix
from pylinalg.storage.base import MatrixStorage, VectorStorage
from pylinalg.storage.dense import (
    DenseColumnMajorMatrixStorage,
    DenseVectorStorage,
)
from pylinalg.storage.diagonal import DiagonalMatrixStorage
from pylinalg.storage.sparse import SparseMatrixStorage, SparseVectorStorage
from pylinalg.vector.base import Vector
from pylinalg.vector.dense import DenseVector
from pylinalg.vector.generic import GenericVector
from pylinalg.vector.sparse import SparseVector


# =====================================================================
# Dense
# =====================================================================

def dense(rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> DenseMatrix:
    """All-zero dense matrix."""
    return DenseMatrix.zeros(rows, columns, dtype)


def dense_of_array(array: ArrayLike, dtype: ScalarOps | Any = None) -> DenseMatrix:
    """Dense matrix holding a copy of a 2-D array-like."""
    return DenseMatrix.of_array(array, dtype)


def dense_of_column_major(rows: int, columns: int, data: NDArray[Any]) -> DenseMatrix:
    """
    Dense matrix wrapping a flat column-major buffer by reference.

    Writes through the matrix are visible in data and vice versa.

    Raises:
        DimensionError: If data does not hold rows * columns elements
        ValidationError: If data is not a 1-D numpy array of a supported dtype
    """
    check_not_none(data, "data")
    if not isinstance(data, np.ndarray):
        raise ValidationError(f"data: expected a numpy.ndarray, got {type(data).__name__}")
    return DenseMatrix(DenseColumnMajorMatrixStorage(rows, columns, scalar_ops_for(data.dtype), data))


def dense_of_rows(rows: Sequence[Vector | ArrayLike], dtype: ScalarOps | Any = None) -> DenseMatrix:
    return DenseMatrix.from_rows(rows, dtype)


def dense_of_columns(columns: Sequence[Vector | ArrayLike], dtype: ScalarOps | Any = None) -> DenseMatrix:
    return DenseMatrix.from_columns(columns, dtype)


def dense_identity(order: int, dtype: ScalarOps | Any = np.float64) -> DenseMatrix:
    order = check_dimension(order, "order")
    return DenseMatrix.of_array(np.eye(order), dtype)


# =====================================================================
# Square, sparse and diagonal
# =====================================================================

def square(order: int, dtype: ScalarOps | Any = np.float64) -> SquareMatrix:
    return SquareMatrix.zeros(order, order, dtype)


def square_of_array(array: ArrayLike, dtype: ScalarOps | Any = None) -> SquareMatrix:
    """
    Square matrix holding a copy of an n x n array-like.

    Raises:
        NotSquareError: If the array is not square
    """
    return SquareMatrix.of_array(array, dtype)


def sparse(rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> SparseMatrix:
    return SparseMatrix.zeros(rows, columns, dtype)


def sparse_of_array(array: Any, dtype: ScalarOps | Any = None) -> SparseMatrix:
    """Sparse matrix from a 2-D array-like or any scipy.sparse matrix."""
    return SparseMatrix.of_array(array, dtype)


def sparse_of_rows(rows: Sequence[Vector | ArrayLike], dtype: ScalarOps | Any = None) -> SparseMatrix:
    return SparseMatrix.from_rows(rows, dtype)


def sparse_of_columns(columns: Sequence[Vector | ArrayLike], dtype: ScalarOps | Any = None) -> SparseMatrix:
    return SparseMatrix.from_columns(columns, dtype)


def diagonal(rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> DiagonalMatrix:
    return DiagonalMatrix.zeros(rows, columns, dtype)


def diagonal_of_values(values: ArrayLike, rows: int | None = None, columns: int | None = None,
                       dtype: ScalarOps | Any = None) -> DiagonalMatrix:
    """Diagonal matrix with values on the diagonal; square unless a shape is given."""
    return DiagonalMatrix.of_diagonal(values, rows, columns, dtype)


def identity(order: int, dtype: ScalarOps | Any = np.float64) -> DiagonalMatrix:
    """n x n identity stored as a diagonal matrix."""
    return DiagonalMatrix.identity(order, dtype)


# =====================================================================
# Storage wrapping
# =====================================================================

def matrix_of_storage(storage: MatrixStorage) -> Matrix:
    """
    Matrix over an existing storage, shared by reference.

    Built-in storages get their own matrix kind; any other MatrixStorage
    is wrapped in a GenericMatrix.
    """
    check_not_none(storage, "storage")
    if isinstance(storage, DenseColumnMajorMatrixStorage):
        return DenseMatrix(storage)
    if isinstance(storage, SparseMatrixStorage):
        return SparseMatrix(storage)
    if isinstance(storage, DiagonalMatrixStorage):
        return DiagonalMatrix(storage)
    return GenericMatrix(storage)


def vector_of_storage(storage: VectorStorage) -> Vector:
    """Vector over an existing storage, shared by reference."""
    check_not_none(storage, "storage")
    if isinstance(storage, DenseVectorStorage):
        return DenseVector(storage)
    if isinstance(storage, SparseVectorStorage):
        return SparseVector(storage)
    return GenericVector(storage)


# =====================================================================
# Vectors
# =====================================================================

def dense_vector(size: int, dtype: ScalarOps | Any = np.float64) -> DenseVector:
    return DenseVector.zeros(size, dtype)


def dense_vector_of_array(array: ArrayLike, dtype: ScalarOps | Any = None) -> DenseVector:
    return DenseVector.of_array(array, dtype)


def sparse_vector(size: int, dtype: ScalarOps | Any = np.float64) -> SparseVector:
    return SparseVector.zeros(size, dtype)


def sparse_vector_of_array(array: ArrayLike, dtype: ScalarOps | Any = None) -> SparseVector:
    return SparseVector.of_array(array, dtype)


# =====================================================================
# Random
# =====================================================================

def _draw(distribution: Any, count: int, ops: ScalarOps) -> NDArray[Any]:
    check_not_none(distribution, "distribution")
    if not isinstance(distribution, Distribution):
        raise ValidationError(
            f"distribution: expected an object with sample(), got {type(distribution).__name__}"
        )
    values = np.asarray([distribution.sample() for _ in range(count)])
    if not ops.is_complex and np.iscomplexobj(values):
        raise ValidationError(f"distribution: complex samples cannot be stored as {ops.name}")
    return values.astype(ops.dtype)


def random_matrix(rows: int, columns: int, distribution: Distribution,
                  dtype: ScalarOps | Any = np.float64) -> DenseMatrix:
    """
    Dense matrix filled column by column with distribution.sample().

    Raises:
        ValidationError: If distribution has no sample() method
    """
    rows = check_dimension(rows, "rows")
    columns = check_dimension(columns, "columns")
    ops = scalar_ops_for(dtype)
    data = _draw(distribution, rows * columns, ops)
    return DenseMatrix(DenseColumnMajorMatrixStorage(rows, columns, ops, data))


def random_vector(size: int, distribution: Distribution, dtype: ScalarOps | Any = np.float64) -> DenseVector:
    """Dense vector filled with distribution.sample()."""
    size = check_dimension(size, "size")
    ops = scalar_ops_for(dtype)
    return DenseVector(DenseVectorStorage(size, ops, _draw(distribution, size, ops)))

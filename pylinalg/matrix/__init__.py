"""
Matrix types.

Matrix is the abstract base; DenseMatrix, SparseMatrix, DiagonalMatrix
and SquareMatrix are the built-in representations, and GenericMatrix
wraps any user-supplied MatrixStorage.
"""

from pylinalg.matrix.base import Matrix
from pylinalg.matrix.dense import DenseMatrix
from pylinalg.matrix.diagonal import DiagonalMatrix
from pylinalg.matrix.generic import GenericMatrix
from pylinalg.matrix.sparse import SparseMatrix
from pylinalg.matrix.square import SquareMatrix

__all__ = [
    "Matrix",
    "DenseMatrix",
    "SparseMatrix",
    "DiagonalMatrix",
    "SquareMatrix",
    "GenericMatrix",
]

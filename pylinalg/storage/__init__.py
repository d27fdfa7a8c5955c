"""
Storage layer.

Concrete element containers behind matrices and vectors. User-defined
storages subclass MatrixStorage or VectorStorage and implement at() and
set_at().
"""

from pylinalg.storage.base import MatrixStorage, VectorStorage
from pylinalg.storage.dense import DenseColumnMajorMatrixStorage, DenseVectorStorage
from pylinalg.storage.diagonal import DiagonalMatrixStorage
from pylinalg.storage.sparse import SparseMatrixStorage, SparseVectorStorage

__all__ = [
    "MatrixStorage",
    "VectorStorage",
    "DenseColumnMajorMatrixStorage",
    "DenseVectorStorage",
    "DiagonalMatrixStorage",
    "SparseMatrixStorage",
    "SparseVectorStorage",
]

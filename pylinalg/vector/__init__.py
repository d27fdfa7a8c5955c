"""
Vectors.

Vector is the abstract base; DenseVector, SparseVector and GenericVector
(any user storage) are the concrete kinds.
"""

from pylinalg.vector.base import Vector
from pylinalg.vector.dense import DenseVector
from pylinalg.vector.generic import GenericVector
from pylinalg.vector.sparse import SparseVector

__all__ = [
    "Vector",
    "DenseVector",
    "SparseVector",
    "GenericVector",
]

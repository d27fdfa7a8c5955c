"""
pylinalg: generic dense, sparse and diagonal linear algebra for Python.

Matrices and vectors over pluggable storages, with validated arithmetic,
caller-supplied result containers, and optional GPU execution through
PyTorch.

Submodules:
    builder: Factory functions for every built-in matrix and vector kind
    matrix: Matrix types
    vector: Vector types
    storage: Element containers behind matrices and vectors
    factorization: LU and SVD
    providers: CPU (NumPy) and GPU (PyTorch) execution providers
"""

__version__ = "0.1.0"

from pylinalg import builder
from pylinalg.core.exceptions import (
    PyLinalgError,
    ValidationError,
    NullArgumentError,
    DimensionError,
    NotSquareError,
    IndexOutOfRangeError,
    NumericalError,
    DivideByZeroError,
    SingularMatrixError,
    NotSupportedError,
    StructurallyUnsupportedError,
    ProviderError,
)
from pylinalg.distributions import ScipyDistribution
from pylinalg.matrix import (
    DenseMatrix,
    DiagonalMatrix,
    GenericMatrix,
    Matrix,
    SparseMatrix,
    SquareMatrix,
)
from pylinalg.permutation import Permutation
from pylinalg.vector import DenseVector, GenericVector, SparseVector, Vector

__all__ = [
    "__version__",
    "builder",
    # Containers
    "Matrix",
    "DenseMatrix",
    "SparseMatrix",
    "DiagonalMatrix",
    "SquareMatrix",
    "GenericMatrix",
    "Vector",
    "DenseVector",
    "SparseVector",
    "GenericVector",
    "Permutation",
    "ScipyDistribution",
    # Exceptions
    "PyLinalgError",
    "ValidationError",
    "NullArgumentError",
    "DimensionError",
    "NotSquareError",
    "IndexOutOfRangeError",
    "NumericalError",
    "DivideByZeroError",
    "SingularMatrixError",
    "NotSupportedError",
    "StructurallyUnsupportedError",
    "ProviderError",
]

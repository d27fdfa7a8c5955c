"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from pylinalg.core.config import configure, get_settings
from pylinalg.matrix import DenseMatrix, GenericMatrix, SparseMatrix
from pylinalg.providers import set_provider
from pylinalg.storage import MatrixStorage, VectorStorage
from pylinalg.vector import DenseVector, GenericVector, SparseVector


class ListMatrixStorage(MatrixStorage):
    """Minimal user-defined storage: nested Python lists, at/set_at only."""

    def __init__(self, row_count, column_count, ops=None):
        super().__init__(row_count, column_count, ops)
        self.cells = [[self.ops.zero] * self.column_count for _ in range(self.row_count)]

    def at(self, row, column):
        return self.cells[row][column]

    def set_at(self, row, column, value):
        self.cells[row][column] = self.ops.dtype.type(value)


class ListVectorStorage(VectorStorage):
    """Minimal user-defined vector storage."""

    def __init__(self, length, ops=None):
        super().__init__(length, ops)
        self.cells = [self.ops.zero] * self.length

    def at(self, index):
        return self.cells[index]

    def set_at(self, index, value):
        self.cells[index] = self.ops.dtype.type(value)


def generic_matrix(array, dtype=None):
    values = np.asarray(array)
    storage = ListMatrixStorage(values.shape[0], values.shape[1], dtype or np.float64)
    matrix = GenericMatrix(storage)
    for (i, j), value in np.ndenumerate(values):
        storage.set_at(i, j, value)
    return matrix


def generic_vector(array, dtype=None):
    values = np.asarray(array)
    vector = GenericVector(ListVectorStorage(values.shape[0], dtype or np.float64))
    vector.set_values(values)
    return vector


MATRIX_KINDS = {
    'dense': DenseMatrix.of_array,
    'sparse': SparseMatrix.of_array,
    'generic': generic_matrix,
}

VECTOR_KINDS = {
    'dense': DenseVector.of_array,
    'sparse': SparseVector.of_array,
    'generic': generic_vector,
}


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture(params=sorted(MATRIX_KINDS))
def make_matrix(request):
    """Builds a float64 matrix of each representation from a 2-D array."""
    return MATRIX_KINDS[request.param]


@pytest.fixture(params=sorted(VECTOR_KINDS))
def make_vector(request):
    """Builds a float64 vector of each representation from a 1-D array."""
    return VECTOR_KINDS[request.param]


@pytest.fixture
def a_array():
    return np.array([[2.0, 0.0], [1.0, 3.0]])


@pytest.fixture
def b_array():
    return np.array([[1.0, 2.0], [0.0, 1.0]])


@pytest.fixture(autouse=True)
def _restore_global_state():
    """Settings and provider overrides never leak between tests."""
    settings = get_settings()
    yield
    configure(**{name: getattr(settings, name) for name in settings.__dataclass_fields__})
    set_provider(None)


@pytest.fixture
def list_matrix_storage():
    """User-defined MatrixStorage class implementing only at/set_at."""
    return ListMatrixStorage


@pytest.fixture
def list_vector_storage():
    """User-defined VectorStorage class implementing only at/set_at."""
    return ListVectorStorage


@pytest.fixture
def make_generic_matrix():
    return generic_matrix


@pytest.fixture
def make_generic_vector():
    return generic_vector

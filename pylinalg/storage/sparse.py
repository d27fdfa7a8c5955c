"""
Sparse storages keeping only non-zero elements.

A matrix keeps one dictionary per row mapping column index to value; a
vector keeps one dictionary mapping index to value. Writing the zero of
the element type removes the entry, so the stored pattern is always
exactly the set of non-zeros.

For products, to_scipy() hands the pattern to scipy.sparse.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from pylinalg.core.capabilities import (
    CAPABILITY_FULLY_MUTABLE,
    CAPABILITY_PERMUTABLE,
    CAPABILITY_SPARSE,
)
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.storage.base import MatrixStorage, VectorStorage


class SparseMatrixStorage(MatrixStorage):
    """
    Row dictionaries of non-zero elements.

    Attributes:
        rows: rows[i] maps column index to the non-zero value at (i, column)
    """

    CAPABILITIES = frozenset({CAPABILITY_SPARSE, CAPABILITY_FULLY_MUTABLE, CAPABILITY_PERMUTABLE})

    def __init__(self, row_count: int, column_count: int, ops: ScalarOps | Any = None):
        super().__init__(row_count, column_count, ops)
        self.rows: list[dict[int, Any]] = [{} for _ in range(self.row_count)]

    @classmethod
    def from_scipy(cls, matrix: Any, ops: ScalarOps | Any = None) -> SparseMatrixStorage:
        """Copy any scipy.sparse matrix or array."""
        coo = sp.coo_array(matrix)
        ops = scalar_ops_for(coo.dtype if ops is None else ops)
        rows, columns = coo.shape
        storage = cls(rows, columns, ops)
        for row, column, value in zip(coo.row, coo.col, coo.data):
            storage.set_at(int(row), int(column), ops.dtype.type(value))
        return storage

    @property
    def non_zeros_count(self) -> int:
        return sum(len(row) for row in self.rows)

    def at(self, row: int, column: int) -> Any:
        return self.rows[row].get(column, self.ops.zero)

    def set_at(self, row: int, column: int, value: Any) -> None:
        if self.ops.is_zero(value):
            self.rows[row].pop(column, None)
        else:
            self.rows[row][column] = self.ops.dtype.type(value)

    def clear(self) -> None:
        for row in self.rows:
            row.clear()

    def clear_region(self, row_index: int, row_count: int, column_index: int, column_count: int) -> None:
        stop = column_index + column_count
        for row in self.rows[row_index:row_index + row_count]:
            for column in [c for c in row if column_index <= c < stop]:
                del row[column]

    def clear_rows(self, row_indices: Iterable[int]) -> None:
        for row in row_indices:
            self.rows[row].clear()

    def clear_columns(self, column_indices: Iterable[int]) -> None:
        doomed = set(column_indices)
        for row in self.rows:
            for column in doomed.intersection(row):
                del row[column]

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, int, Any]]:
        entries = [
            (row, column, value)
            for row, values in enumerate(self.rows)
            for column, value in values.items()
        ]
        entries.sort(key=lambda entry: (entry[1], entry[0]))
        yield from entries

    def to_scipy(self) -> sp.csr_array:
        """Export the pattern as a scipy.sparse CSR array."""
        row_idx, col_idx, values = [], [], []
        for row, column, value in self.enumerate_nonzero_indexed():
            row_idx.append(row)
            col_idx.append(column)
            values.append(value)
        return sp.csr_array(
            (np.asarray(values, dtype=self.ops.dtype), (row_idx, col_idx)),
            shape=(self.row_count, self.column_count),
        )

    def to_array(self) -> NDArray[Any]:
        result = np.zeros((self.row_count, self.column_count), dtype=self.ops.dtype, order='F')
        for row, values in enumerate(self.rows):
            for column, value in values.items():
                result[row, column] = value
        return result


class SparseVectorStorage(VectorStorage):
    """
    Dictionary of non-zero elements.

    Attributes:
        values: Maps index to the non-zero value stored there
    """

    CAPABILITIES = frozenset({CAPABILITY_SPARSE, CAPABILITY_FULLY_MUTABLE})

    def __init__(self, length: int, ops: ScalarOps | Any = None):
        super().__init__(length, ops)
        self.values: dict[int, Any] = {}

    @property
    def non_zeros_count(self) -> int:
        return len(self.values)

    def at(self, index: int) -> Any:
        return self.values.get(index, self.ops.zero)

    def set_at(self, index: int, value: Any) -> None:
        if self.ops.is_zero(value):
            self.values.pop(index, None)
        else:
            self.values[index] = self.ops.dtype.type(value)

    def clear(self) -> None:
        self.values.clear()

    def clear_range(self, index: int, count: int) -> None:
        stop = index + count
        for i in [i for i in self.values if index <= i < stop]:
            del self.values[i]

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, Any]]:
        yield from sorted(self.values.items())

    def to_array(self) -> NDArray[Any]:
        result = np.zeros(self.length, dtype=self.ops.dtype)
        for index, value in self.values.items():
            result[index] = value
        return result

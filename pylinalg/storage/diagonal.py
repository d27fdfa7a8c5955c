"""
Diagonal-only matrix storage.

Only the main diagonal is kept, as a 1-D NumPy buffer of length
min(row_count, column_count). Writing zero off the diagonal is accepted
and has no effect; writing any other value off the diagonal raises
StructurallyUnsupportedError.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import numpy as np
from numpy.typing import NDArray

from pylinalg.core.capabilities import CAPABILITY_DIAGONAL
from pylinalg.core.exceptions import StructurallyUnsupportedError
from pylinalg.core.scalars import ScalarOps
from pylinalg.storage.base import MatrixStorage
from pylinalg.storage.dense import check_buffer


class DiagonalMatrixStorage(MatrixStorage):
    """
    Main diagonal of a matrix; every other element is zero.

    Attributes:
        data: Diagonal values, data[i] is the element at (i, i)
    """

    CAPABILITIES = frozenset({CAPABILITY_DIAGONAL})

    def __init__(self, row_count: int, column_count: int, ops: ScalarOps | Any = None,
                 data: NDArray[Any] | None = None):
        super().__init__(row_count, column_count, ops)
        size = min(self.row_count, self.column_count)
        if data is None:
            data = np.zeros(size, dtype=self.ops.dtype)
        self.data = check_buffer(data, size, self.ops, "data")

    def is_mutable_at(self, row: int, column: int) -> bool:
        return row == column

    def at(self, row: int, column: int) -> Any:
        if row == column:
            return self.data[row]
        return self.ops.zero

    def set_at(self, row: int, column: int, value: Any) -> None:
        if row == column:
            self.data[row] = value
        elif not self.ops.is_zero(value):
            raise StructurallyUnsupportedError(
                f"value: cannot set non-zero {value!r} at off-diagonal ({row}, {column}) "
                f"of a diagonal storage",
                storage=type(self).__name__,
            )

    def shares_memory_with(self, other: Any) -> bool:
        if other is self:
            return True
        buffer = getattr(other, "data", None)
        return isinstance(buffer, np.ndarray) and np.may_share_memory(self.data, buffer)

    def clear(self) -> None:
        self.data.fill(0)

    def clear_region(self, row_index: int, row_count: int, column_index: int, column_count: int) -> None:
        start = max(row_index, column_index)
        stop = min(row_index + row_count, column_index + column_count)
        if start < stop:
            self.data[start:stop] = 0

    def clear_rows(self, row_indices: Iterable[int]) -> None:
        for row in row_indices:
            if row < self.data.shape[0]:
                self.data[row] = 0

    def clear_columns(self, column_indices: Iterable[int]) -> None:
        self.clear_rows(column_indices)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DiagonalMatrixStorage):
            return (
                (self.row_count, self.column_count) == (other.row_count, other.column_count)
                and self.ops is other.ops
                and bool(np.array_equal(self.data, other.data))
            )
        return super().__eq__(other)

    __hash__ = MatrixStorage.__hash__

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, int, Any]]:
        for i, value in enumerate(self.data.copy()):
            if not self.ops.is_zero(value):
                yield i, i, value

    def to_array(self) -> NDArray[Any]:
        result = np.zeros((self.row_count, self.column_count), dtype=self.ops.dtype, order='F')
        np.fill_diagonal(result, self.data)
        return result

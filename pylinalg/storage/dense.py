"""
Dense storages backed by NumPy buffers.

Matrices are stored column-major in a flat 1-D buffer (leading dimension
equal to the row count), which is also the layout execution providers
consume. as_array() exposes the buffer as a (rows, columns) view.

A storage constructed with an existing buffer wraps it by reference:
writes through the storage are visible in the caller's array and vice
versa.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.capabilities import (
    CAPABILITY_DENSE,
    CAPABILITY_FULLY_MUTABLE,
    CAPABILITY_PERMUTABLE,
)
from pylinalg.core.exceptions import DimensionError, ValidationError
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.core.validation import check_range
from pylinalg.storage.base import MatrixStorage, VectorStorage


def check_buffer(data: Any, length: int, ops: ScalarOps, name: str) -> NDArray[Any]:
    if not isinstance(data, np.ndarray):
        raise ValidationError(f"{name}: expected a numpy.ndarray, got {type(data).__name__}")
    if data.ndim != 1:
        raise DimensionError(
            f"{name}: expected a 1-D buffer, got {data.ndim}-D with shape {data.shape}",
            name=name, expected=(length,), actual=data.shape,
        )
    if data.shape[0] != length:
        raise DimensionError(
            f"{name}: expected {length} elements, got {data.shape[0]}",
            name=name, expected=length, actual=data.shape[0],
        )
    if data.dtype != ops.dtype:
        raise ValidationError(f"{name}: expected dtype {ops.dtype}, got {data.dtype}")
    return data


class DenseColumnMajorMatrixStorage(MatrixStorage):
    """
    Every element stored in a column-major NumPy buffer.

    Attributes:
        data: Flat buffer of length row_count * column_count
    """

    CAPABILITIES = frozenset({CAPABILITY_DENSE, CAPABILITY_FULLY_MUTABLE, CAPABILITY_PERMUTABLE})

    def __init__(self, row_count: int, column_count: int, ops: ScalarOps | Any = None,
                 data: NDArray[Any] | None = None):
        super().__init__(row_count, column_count, ops)
        size = self.row_count * self.column_count
        if data is None:
            data = np.zeros(size, dtype=self.ops.dtype)
        self.data = check_buffer(data, size, self.ops, "data")

    @classmethod
    def of_array(cls, array: ArrayLike, ops: ScalarOps | Any = None) -> DenseColumnMajorMatrixStorage:
        """Copy a 2-D array-like into a new storage."""
        values = np.asarray(array)
        if values.ndim != 2:
            raise DimensionError(
                f"array: expected 2-D input, got {values.ndim}-D with shape {values.shape}",
                name="array", actual=values.shape,
            )
        ops = scalar_ops_for(values.dtype if ops is None else ops)
        if not ops.is_complex and np.iscomplexobj(values):
            raise ValidationError(f"array: complex data cannot be stored as {ops.name}")
        rows, columns = values.shape
        data = np.asarray(values, dtype=ops.dtype).reshape(-1, order='F').copy()
        return cls(rows, columns, ops, data)

    def as_array(self) -> NDArray[Any]:
        """(row_count, column_count) view of the buffer; writes go through."""
        return self.data.reshape((self.row_count, self.column_count), order='F')

    def at(self, row: int, column: int) -> Any:
        return self.data[column * self.row_count + row]

    def set_at(self, row: int, column: int, value: Any) -> None:
        self.data[column * self.row_count + row] = value

    def shares_memory_with(self, other: Any) -> bool:
        if other is self:
            return True
        buffer = getattr(other, "data", None)
        return isinstance(buffer, np.ndarray) and np.may_share_memory(self.data, buffer)

    def clear(self) -> None:
        self.data.fill(0)

    def clear_region(self, row_index: int, row_count: int, column_index: int, column_count: int) -> None:
        self.as_array()[row_index:row_index + row_count, column_index:column_index + column_count] = 0

    def clear_rows(self, row_indices) -> None:
        self.as_array()[list(row_indices), :] = 0

    def clear_columns(self, column_indices) -> None:
        self.as_array()[:, list(column_indices)] = 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DenseColumnMajorMatrixStorage):
            return (
                (self.row_count, self.column_count) == (other.row_count, other.column_count)
                and self.ops is other.ops
                and bool(np.array_equal(self.data, other.data))
            )
        return super().__eq__(other)

    __hash__ = MatrixStorage.__hash__

    def _copy_to_unchecked(self, target: MatrixStorage, skip_clearing: bool) -> None:
        if isinstance(target, DenseColumnMajorMatrixStorage):
            np.copyto(target.data, self.data, casting='same_kind')
            return
        super()._copy_to_unchecked(target, skip_clearing)

    def copy_sub_matrix_to(self, target, source_row_index, target_row_index, row_count,
                           source_column_index, target_column_index, column_count,
                           skip_clearing=False) -> None:
        if not isinstance(target, DenseColumnMajorMatrixStorage):
            super().copy_sub_matrix_to(target, source_row_index, target_row_index, row_count,
                                       source_column_index, target_column_index, column_count,
                                       skip_clearing)
            return
        check_range(source_row_index, row_count, self.row_count, "source_row_index")
        check_range(source_column_index, column_count, self.column_count, "source_column_index")
        check_range(target_row_index, row_count, target.row_count, "target_row_index")
        check_range(target_column_index, column_count, target.column_count, "target_column_index")
        block = self.as_array()[
            source_row_index:source_row_index + row_count,
            source_column_index:source_column_index + column_count,
        ].copy()
        target.as_array()[
            target_row_index:target_row_index + row_count,
            target_column_index:target_column_index + column_count,
        ] = block

    def transpose_to(self, target: MatrixStorage, skip_clearing: bool = False) -> None:
        if isinstance(target, DenseColumnMajorMatrixStorage) and (
            (target.row_count, target.column_count) == (self.column_count, self.row_count)
        ):
            target.as_array()[:, :] = self.as_array().T.copy()
            return
        super().transpose_to(target, skip_clearing)

    def enumerate(self) -> Iterator[Any]:
        return iter(self.data.copy())

    def set_from_array(self, array: NDArray[Any]) -> None:
        self.as_array()[:, :] = array

    def to_array(self) -> NDArray[Any]:
        return self.as_array().copy(order='F')

    def map_inplace(self, f: Callable[[Any], Any], include_zeros: bool = True) -> None:
        data = self.data
        for k in range(data.shape[0]):
            if include_zeros or data[k] != 0:
                data[k] = f(data[k])


class DenseVectorStorage(VectorStorage):
    """
    Every element stored in a 1-D NumPy buffer.

    Attributes:
        data: Buffer of length `length`
    """

    CAPABILITIES = frozenset({CAPABILITY_DENSE, CAPABILITY_FULLY_MUTABLE})

    def __init__(self, length: int, ops: ScalarOps | Any = None, data: NDArray[Any] | None = None):
        super().__init__(length, ops)
        if data is None:
            data = np.zeros(self.length, dtype=self.ops.dtype)
        self.data = check_buffer(data, self.length, self.ops, "data")

    @classmethod
    def of_array(cls, array: ArrayLike, ops: ScalarOps | Any = None) -> DenseVectorStorage:
        """Copy a 1-D array-like into a new storage."""
        values = np.asarray(array)
        if values.ndim != 1:
            raise DimensionError(
                f"array: expected 1-D input, got {values.ndim}-D with shape {values.shape}",
                name="array", actual=values.shape,
            )
        ops = scalar_ops_for(values.dtype if ops is None else ops)
        if not ops.is_complex and np.iscomplexobj(values):
            raise ValidationError(f"array: complex data cannot be stored as {ops.name}")
        return cls(values.shape[0], ops, np.array(values, dtype=ops.dtype))

    def at(self, index: int) -> Any:
        return self.data[index]

    def set_at(self, index: int, value: Any) -> None:
        self.data[index] = value

    def shares_memory_with(self, other: Any) -> bool:
        if other is self:
            return True
        buffer = getattr(other, "data", None)
        return isinstance(buffer, np.ndarray) and np.may_share_memory(self.data, buffer)

    def clear(self) -> None:
        self.data.fill(0)

    def clear_range(self, index: int, count: int) -> None:
        self.data[index:index + count] = 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DenseVectorStorage):
            return (
                self.length == other.length
                and self.ops is other.ops
                and bool(np.array_equal(self.data, other.data))
            )
        return super().__eq__(other)

    __hash__ = VectorStorage.__hash__

    def copy_to(self, target: VectorStorage, skip_clearing: bool = False) -> None:
        if isinstance(target, DenseVectorStorage) and target.length == self.length:
            if target is not self:
                np.copyto(target.data, self.data, casting='same_kind')
            return
        super().copy_to(target, skip_clearing)

    def enumerate(self) -> Iterator[Any]:
        return iter(self.data.copy())

    def set_from_array(self, array: NDArray[Any]) -> None:
        self.data[:] = array

    def to_array(self) -> NDArray[Any]:
        return self.data.copy()

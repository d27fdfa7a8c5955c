"""
Storage base classes.

A storage owns the elements of one matrix or vector. Containers talk to
their storage only through this contract, so the arithmetic layer never
branches on how a representation lays out its data.

Subclasses must implement at() and set_at(); every other member has a
correct element-by-element default which concrete storages override
with bulk fast paths where they can.

Design principles:
    - at/set_at are unchecked: callers have already validated indices
    - copies into a storage that is not fully mutable validate the whole
      source before the first write
    - traversals are generators, finite and restartable
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

import numpy as np
from numpy.typing import NDArray

from pylinalg.core.capabilities import (
    CAPABILITY_DENSE,
    CAPABILITY_FULLY_MUTABLE,
    CAPABILITY_PERMUTABLE,
)
from pylinalg.core.exceptions import DimensionError, StructurallyUnsupportedError
from pylinalg.core.parallel import parallel_for
from pylinalg.core.scalars import ScalarOps, scalar_ops_for
from pylinalg.core.validation import (
    check_dimension,
    check_not_none,
    check_range,
)

T = TypeVar('T')

# Number of leading elements mixed into a storage hash
_HASH_ELEMENTS = 25


class MatrixStorage(ABC, Generic[T]):
    """
    Element container behind a Matrix.

    Attributes:
        row_count: Number of rows (fixed at construction)
        column_count: Number of columns (fixed at construction)
        ops: ScalarOps strategy of the element type
    """

    CAPABILITIES: frozenset[str] = frozenset({CAPABILITY_FULLY_MUTABLE, CAPABILITY_PERMUTABLE})

    def __init__(self, row_count: int, column_count: int, ops: ScalarOps | Any = None):
        self.row_count = check_dimension(row_count, "row_count")
        self.column_count = check_dimension(column_count, "column_count")
        self.ops = scalar_ops_for(np.float64 if ops is None else ops)

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def supports(self, capability: str) -> bool:
        """Unknown capabilities return False, never raise."""
        return capability in self.CAPABILITIES

    @property
    def is_dense(self) -> bool:
        return self.supports(CAPABILITY_DENSE)

    @property
    def is_fully_mutable(self) -> bool:
        return self.supports(CAPABILITY_FULLY_MUTABLE)

    def is_mutable_at(self, row: int, column: int) -> bool:
        """True if the element at (row, column) may take a non-zero value."""
        return self.is_fully_mutable

    def shares_memory_with(self, other: Any) -> bool:
        """True if writes through one storage may be visible through other."""
        return self is other

    def validate_receivable(self, entries: Iterable[tuple[int, int, Any]], name: str) -> None:
        """
        Check that every non-zero (row, column, value) entry fits the pattern.

        Raises:
            StructurallyUnsupportedError: On the first entry that does not fit
        """
        if self.is_fully_mutable:
            return
        for row, column, value in entries:
            if not self.ops.is_zero(value) and not self.is_mutable_at(row, column):
                raise StructurallyUnsupportedError(
                    f"{name}: {type(self).__name__} cannot hold a non-zero "
                    f"at ({row}, {column})",
                    storage=type(self).__name__,
                )

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    @abstractmethod
    def at(self, row: int, column: int) -> T:
        """Read one element without bounds checking."""
        pass

    @abstractmethod
    def set_at(self, row: int, column: int, value: T) -> None:
        """Write one element without bounds checking."""
        pass

    # ------------------------------------------------------------------
    # Clearing
    # ------------------------------------------------------------------

    def clear(self) -> None:
        zero = self.ops.zero
        for row, column, _ in list(self.enumerate_nonzero_indexed()):
            self.set_at(row, column, zero)

    def clear_region(self, row_index: int, row_count: int, column_index: int, column_count: int) -> None:
        zero = self.ops.zero
        for column in range(column_index, column_index + column_count):
            for row in range(row_index, row_index + row_count):
                self.set_at(row, column, zero)

    def clear_rows(self, row_indices: Iterable[int]) -> None:
        for row in row_indices:
            self.clear_region(row, 1, 0, self.column_count)

    def clear_columns(self, column_indices: Iterable[int]) -> None:
        for column in column_indices:
            self.clear_region(0, self.row_count, column, 1)

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatrixStorage):
            return NotImplemented
        if self is other:
            return True
        if (self.row_count, self.column_count) != (other.row_count, other.column_count):
            return False
        if self.ops is not other.ops:
            return False
        return all(a == b for a, b in zip(self.enumerate(), other.enumerate()))

    def __hash__(self) -> int:
        head = tuple(itertools.islice(self.enumerate(), _HASH_ELEMENTS))
        return hash((self.row_count, self.column_count) + head)

    # ------------------------------------------------------------------
    # Copying
    # ------------------------------------------------------------------

    def copy_to(self, target: MatrixStorage, skip_clearing: bool = False) -> None:
        """
        Copy every element into a target of the same shape.

        Args:
            target: Destination storage
            skip_clearing: Target is known to be all zeros already

        Raises:
            DimensionError: If the shapes differ
            StructurallyUnsupportedError: If target cannot hold the values
        """
        check_not_none(target, "target")
        if target is self:
            return
        shape = (self.row_count, self.column_count)
        if (target.row_count, target.column_count) != shape:
            raise DimensionError(
                f"target: expected shape {shape}, got "
                f"{(target.row_count, target.column_count)}",
                name="target", expected=shape,
                actual=(target.row_count, target.column_count),
            )
        target.validate_receivable(self.enumerate_nonzero_indexed(), "target")
        self._copy_to_unchecked(target, skip_clearing)

    def _copy_to_unchecked(self, target: MatrixStorage, skip_clearing: bool) -> None:
        entries = list(self.enumerate_nonzero_indexed())
        if not skip_clearing:
            target.clear()
        for row, column, value in entries:
            target.set_at(row, column, value)

    def copy_sub_matrix_to(
        self,
        target: MatrixStorage,
        source_row_index: int,
        target_row_index: int,
        row_count: int,
        source_column_index: int,
        target_column_index: int,
        column_count: int,
        skip_clearing: bool = False,
    ) -> None:
        """
        Copy a rectangular block into target at another offset.

        Overlapping source and target regions of one storage are handled by
        snapshotting the block before writing.

        Raises:
            IndexOutOfRangeError: If either block leaves its storage
            StructurallyUnsupportedError: If target cannot hold the values
        """
        check_not_none(target, "target")
        check_range(source_row_index, row_count, self.row_count, "source_row_index")
        check_range(source_column_index, column_count, self.column_count, "source_column_index")
        check_range(target_row_index, row_count, target.row_count, "target_row_index")
        check_range(target_column_index, column_count, target.column_count, "target_column_index")

        row_shift = target_row_index - source_row_index
        column_shift = target_column_index - source_column_index
        block = [
            (row + row_shift, column + column_shift, self.at(row, column))
            for column in range(source_column_index, source_column_index + column_count)
            for row in range(source_row_index, source_row_index + row_count)
        ]
        target.validate_receivable(block, "target")
        self._write_block(target, block, target_row_index, row_count,
                          target_column_index, column_count, skip_clearing)

    @staticmethod
    def _write_block(target, block, row_index, row_count, column_index, column_count, skip_clearing):
        if not skip_clearing:
            target.clear_region(row_index, row_count, column_index, column_count)
        for row, column, value in block:
            if not target.ops.is_zero(value):
                target.set_at(row, column, value)

    def copy_row_to(self, target: VectorStorage, row_index: int, skip_clearing: bool = False) -> None:
        self.copy_sub_row_to(target, row_index, 0, 0, self.column_count, skip_clearing)

    def copy_column_to(self, target: VectorStorage, column_index: int, skip_clearing: bool = False) -> None:
        self.copy_sub_column_to(target, column_index, 0, 0, self.row_count, skip_clearing)

    def copy_sub_row_to(
        self,
        target: VectorStorage,
        row_index: int,
        source_column_index: int,
        target_index: int,
        column_count: int,
        skip_clearing: bool = False,
    ) -> None:
        """Copy part of one row into a vector storage."""
        check_not_none(target, "target")
        check_range(row_index, 1, self.row_count, "row_index")
        check_range(source_column_index, column_count, self.column_count, "source_column_index")
        check_range(target_index, column_count, target.length, "target_index")
        values = [self.at(row_index, source_column_index + k) for k in range(column_count)]
        if not skip_clearing:
            target.clear_range(target_index, column_count)
        for k, value in enumerate(values):
            target.set_at(target_index + k, value)

    def copy_sub_column_to(
        self,
        target: VectorStorage,
        column_index: int,
        source_row_index: int,
        target_index: int,
        row_count: int,
        skip_clearing: bool = False,
    ) -> None:
        """Copy part of one column into a vector storage."""
        check_not_none(target, "target")
        check_range(column_index, 1, self.column_count, "column_index")
        check_range(source_row_index, row_count, self.row_count, "source_row_index")
        check_range(target_index, row_count, target.length, "target_index")
        values = [self.at(source_row_index + k, column_index) for k in range(row_count)]
        if not skip_clearing:
            target.clear_range(target_index, row_count)
        for k, value in enumerate(values):
            target.set_at(target_index + k, value)

    def transpose_to(self, target: MatrixStorage, skip_clearing: bool = False) -> None:
        """
        Write the transpose into a target of the swapped shape.

        Raises:
            DimensionError: If target is not (column_count, row_count)
        """
        check_not_none(target, "target")
        shape = (self.column_count, self.row_count)
        if (target.row_count, target.column_count) != shape:
            raise DimensionError(
                f"target: expected shape {shape}, got "
                f"{(target.row_count, target.column_count)}",
                name="target", expected=shape,
                actual=(target.row_count, target.column_count),
            )
        entries = [(column, row, value) for row, column, value in self.enumerate_nonzero_indexed()]
        target.validate_receivable(entries, "target")
        if not skip_clearing:
            target.clear()
        for row, column, value in entries:
            target.set_at(row, column, value)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def enumerate(self) -> Iterator[T]:
        """All elements in column-major order."""
        for column in range(self.column_count):
            for row in range(self.row_count):
                yield self.at(row, column)

    def enumerate_indexed(self) -> Iterator[tuple[int, int, T]]:
        """(row, column, value) for every element in column-major order."""
        for column in range(self.column_count):
            for row in range(self.row_count):
                yield row, column, self.at(row, column)

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, int, T]]:
        """(row, column, value) for the non-zero elements."""
        ops = self.ops
        for row, column, value in self.enumerate_indexed():
            if not ops.is_zero(value):
                yield row, column, value

    def set_from_array(self, array: NDArray[Any]) -> None:
        """
        Overwrite every element from a (row_count, column_count) array.

        The caller guarantees the shape; a storage that is not fully
        mutable is validated before the first write.
        """
        nonzero = [
            (int(i), int(j), array[i, j]) for i, j in zip(*np.nonzero(array))
        ]
        self.validate_receivable(nonzero, "array")
        self.clear()
        for row, column, value in nonzero:
            self.set_at(row, column, value)

    def to_array(self) -> NDArray[Any]:
        """Materialize into a new (row_count, column_count) NumPy array."""
        rows = self.row_count
        result = np.empty((rows, self.column_count), dtype=self.ops.dtype, order='F')
        flat = result.reshape(-1, order='F')

        def fill(start: int, stop: int) -> None:
            for k in range(start, stop):
                flat[k] = self.at(k % rows, k // rows)

        parallel_for(rows * self.column_count, fill)
        return result

    def map_inplace(self, f: Callable[[T], T], include_zeros: bool = True) -> None:
        """
        Replace every element x by f(x).

        With include_zeros False, only stored non-zero elements are passed
        to f; zeros stay zero.

        Raises:
            StructurallyUnsupportedError: If f produces a non-zero the
                storage cannot hold (nothing is written in that case)
        """
        source = self.enumerate_indexed() if include_zeros else self.enumerate_nonzero_indexed()
        entries = [(row, column, f(value)) for row, column, value in source]
        self.validate_receivable(entries, "f")
        for row, column, value in entries:
            self.set_at(row, column, value)

    def map_indexed_inplace(self, f: Callable[[int, int, T], T], include_zeros: bool = True) -> None:
        """Replace every element by f(row, column, x)."""
        source = self.enumerate_indexed() if include_zeros else self.enumerate_nonzero_indexed()
        entries = [(row, column, f(row, column, value)) for row, column, value in source]
        self.validate_receivable(entries, "f")
        for row, column, value in entries:
            self.set_at(row, column, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.row_count}x{self.column_count}, {self.ops.name})"


class VectorStorage(ABC, Generic[T]):
    """
    Element container behind a Vector.

    Attributes:
        length: Number of elements (fixed at construction)
        ops: ScalarOps strategy of the element type
    """

    CAPABILITIES: frozenset[str] = frozenset({CAPABILITY_FULLY_MUTABLE})

    def __init__(self, length: int, ops: ScalarOps | Any = None):
        self.length = check_dimension(length, "length")
        self.ops = scalar_ops_for(np.float64 if ops is None else ops)

    def supports(self, capability: str) -> bool:
        return capability in self.CAPABILITIES

    @property
    def is_dense(self) -> bool:
        return self.supports(CAPABILITY_DENSE)

    @property
    def is_fully_mutable(self) -> bool:
        return self.supports(CAPABILITY_FULLY_MUTABLE)

    def shares_memory_with(self, other: Any) -> bool:
        return self is other

    @abstractmethod
    def at(self, index: int) -> T:
        """Read one element without bounds checking."""
        pass

    @abstractmethod
    def set_at(self, index: int, value: T) -> None:
        """Write one element without bounds checking."""
        pass

    def clear(self) -> None:
        zero = self.ops.zero
        for index, _ in list(self.enumerate_nonzero_indexed()):
            self.set_at(index, zero)

    def clear_range(self, index: int, count: int) -> None:
        zero = self.ops.zero
        for i in range(index, index + count):
            self.set_at(i, zero)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorStorage):
            return NotImplemented
        if self is other:
            return True
        if self.length != other.length or self.ops is not other.ops:
            return False
        return all(a == b for a, b in zip(self.enumerate(), other.enumerate()))

    def __hash__(self) -> int:
        head = tuple(itertools.islice(self.enumerate(), _HASH_ELEMENTS))
        return hash((self.length,) + head)

    def copy_to(self, target: VectorStorage, skip_clearing: bool = False) -> None:
        """
        Copy every element into a target of the same length.

        Raises:
            DimensionError: If the lengths differ
        """
        check_not_none(target, "target")
        if target is self:
            return
        if target.length != self.length:
            raise DimensionError(
                f"target: expected {self.length} elements, got {target.length}",
                name="target", expected=self.length, actual=target.length,
            )
        entries = list(self.enumerate_nonzero_indexed())
        if not skip_clearing:
            target.clear()
        for index, value in entries:
            target.set_at(index, value)

    def copy_sub_vector_to(
        self,
        target: VectorStorage,
        source_index: int,
        target_index: int,
        count: int,
        skip_clearing: bool = False,
    ) -> None:
        """Copy count elements starting at source_index into target at target_index."""
        check_not_none(target, "target")
        check_range(source_index, count, self.length, "source_index")
        check_range(target_index, count, target.length, "target_index")
        values = [self.at(source_index + k) for k in range(count)]
        if not skip_clearing:
            target.clear_range(target_index, count)
        for k, value in enumerate(values):
            if not target.ops.is_zero(value):
                target.set_at(target_index + k, value)

    def copy_to_row(self, target: MatrixStorage, row_index: int, skip_clearing: bool = False) -> None:
        self.copy_to_sub_row(target, row_index, 0, 0, self.length, skip_clearing)

    def copy_to_column(self, target: MatrixStorage, column_index: int, skip_clearing: bool = False) -> None:
        self.copy_to_sub_column(target, column_index, 0, 0, self.length, skip_clearing)

    def copy_to_sub_row(
        self,
        target: MatrixStorage,
        row_index: int,
        source_index: int,
        target_column_index: int,
        count: int,
        skip_clearing: bool = False,
    ) -> None:
        """Write count elements into one row of a matrix storage."""
        check_not_none(target, "target")
        check_range(row_index, 1, target.row_count, "row_index")
        check_range(source_index, count, self.length, "source_index")
        check_range(target_column_index, count, target.column_count, "target_column_index")
        block = [
            (row_index, target_column_index + k, self.at(source_index + k)) for k in range(count)
        ]
        target.validate_receivable(block, "target")
        MatrixStorage._write_block(target, block, row_index, 1, target_column_index, count, skip_clearing)

    def copy_to_sub_column(
        self,
        target: MatrixStorage,
        column_index: int,
        source_index: int,
        target_row_index: int,
        count: int,
        skip_clearing: bool = False,
    ) -> None:
        """Write count elements into one column of a matrix storage."""
        check_not_none(target, "target")
        check_range(column_index, 1, target.column_count, "column_index")
        check_range(source_index, count, self.length, "source_index")
        check_range(target_row_index, count, target.row_count, "target_row_index")
        block = [
            (target_row_index + k, column_index, self.at(source_index + k)) for k in range(count)
        ]
        target.validate_receivable(block, "target")
        MatrixStorage._write_block(target, block, target_row_index, count, column_index, 1, skip_clearing)

    def enumerate(self) -> Iterator[T]:
        for index in range(self.length):
            yield self.at(index)

    def enumerate_indexed(self) -> Iterator[tuple[int, T]]:
        for index in range(self.length):
            yield index, self.at(index)

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, T]]:
        ops = self.ops
        for index, value in self.enumerate_indexed():
            if not ops.is_zero(value):
                yield index, value

    def set_from_array(self, array: NDArray[Any]) -> None:
        """Overwrite every element from a 1-D array of matching length."""
        self.clear()
        for index in np.flatnonzero(array):
            self.set_at(int(index), array[index])

    def to_array(self) -> NDArray[Any]:
        """Materialize into a new 1-D NumPy array."""
        result = np.empty(self.length, dtype=self.ops.dtype)

        def fill(start: int, stop: int) -> None:
            for k in range(start, stop):
                result[k] = self.at(k)

        parallel_for(self.length, fill)
        return result

    def map_inplace(self, f: Callable[[T], T], include_zeros: bool = True) -> None:
        source = self.enumerate_indexed() if include_zeros else self.enumerate_nonzero_indexed()
        for index, value in [(i, f(v)) for i, v in source]:
            self.set_at(index, value)

    def map_indexed_inplace(self, f: Callable[[int, T], T], include_zeros: bool = True) -> None:
        source = self.enumerate_indexed() if include_zeros else self.enumerate_nonzero_indexed()
        for index, value in [(i, f(i, v)) for i, v in source]:
            self.set_at(index, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.length}, {self.ops.name})"

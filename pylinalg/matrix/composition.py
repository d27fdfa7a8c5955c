"""
Structural operations on matrices.

Rows, columns, sub-matrices, triangles, concatenation and permutation.
Everything here moves existing values around; none of it does arithmetic
beyond the row and column normalizations.

Design principles:
    - Operations that can produce values outside a constrained pattern
      (append, stack, insert, kronecker) ask the factory for a fully
      mutable result
    - A constrained caller-supplied result is filled through a fully
      mutable temporary and a validating copy, so a rejected result is
      left untouched
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike

from pylinalg.core.capabilities import CAPABILITY_PERMUTABLE
from pylinalg.core.exceptions import DimensionError, StructurallyUnsupportedError, ValidationError
from pylinalg.core.scalars import scalar_ops_for
from pylinalg.core.validation import (
    check_count,
    check_index,
    check_norm_order,
    check_not_none,
    check_range,
    check_shape,
    check_structure_fits,
)
from pylinalg.permutation import Permutation
from pylinalg.storage.base import VectorStorage
from pylinalg.storage.dense import DenseVectorStorage

if TYPE_CHECKING:
    from pylinalg.matrix.base import Matrix
    from pylinalg.vector.base import Vector


class CompositionMixin:
    """Row, column and block manipulation for Matrix."""

    # ------------------------------------------------------------------
    # Transposition
    # ------------------------------------------------------------------

    def transpose(self) -> Matrix:
        result = self.create_matrix(self.column_count, self.row_count)
        self.storage.transpose_to(result.storage, skip_clearing=True)
        return result

    def conjugate_transpose(self) -> Matrix:
        result = self.transpose()
        if self.ops.is_complex:
            result._do_conjugate(result)
        return result

    # ------------------------------------------------------------------
    # Rows and columns
    # ------------------------------------------------------------------

    def row(self, index: int, start: int = 0, length: int | None = None,
            result: Vector | None = None) -> Vector:
        """
        Copy of a row, or of length elements of it beginning at start.

        Raises:
            IndexOutOfRangeError: If the row or the column range is outside the matrix
            DimensionError: If result does not have length elements
        """
        index = check_index(index, self.row_count, "index")
        if length is None:
            length = self.column_count - start
        check_range(start, length, self.column_count, "start")
        result = self._vector_result(result, length)
        self.storage.copy_sub_row_to(result.storage, index, start, 0, length)
        return result

    def column(self, index: int, start: int = 0, length: int | None = None,
               result: Vector | None = None) -> Vector:
        """Copy of a column, or of length elements of it beginning at start."""
        index = check_index(index, self.column_count, "index")
        if length is None:
            length = self.row_count - start
        check_range(start, length, self.row_count, "start")
        result = self._vector_result(result, length)
        self.storage.copy_sub_column_to(result.storage, index, start, 0, length)
        return result

    def _vector_result(self, result: Vector | None, count: int) -> Vector:
        if result is None:
            return self.create_vector(count)
        self._check_vector(result, "result")
        check_count(result, count, "result")
        return result

    def _vector_storage(self, values: Any, count: int, name: str) -> VectorStorage:
        check_not_none(values, name)
        if isinstance(getattr(values, "storage", None), VectorStorage):
            self._check_vector(values, name)
            check_count(values, count, name)
            return values.storage
        array = np.asarray(values)
        if array.ndim != 1 or array.shape[0] != count:
            raise DimensionError(
                f"{name}: expected {count} elements, got shape {array.shape}",
                name=name, expected=count, actual=array.shape,
            )
        if not self.ops.is_complex and np.iscomplexobj(array):
            raise ValidationError(f"{name}: complex data cannot be stored as {self.ops.name}")
        return DenseVectorStorage.of_array(array, self.ops)

    def set_row(self, index: int, values: Vector | ArrayLike) -> None:
        """
        Overwrite a row from a Vector or 1-D array-like.

        Raises:
            DimensionError: If values does not have column_count elements
            StructurallyUnsupportedError: If the storage cannot hold the values
        """
        index = check_index(index, self.row_count, "index")
        source = self._vector_storage(values, self.column_count, "values")
        source.copy_to_row(self.storage, index)

    def set_column(self, index: int, values: Vector | ArrayLike) -> None:
        """Overwrite a column from a Vector or 1-D array-like."""
        index = check_index(index, self.column_count, "index")
        source = self._vector_storage(values, self.row_count, "values")
        source.copy_to_column(self.storage, index)

    def clear_row(self, index: int) -> None:
        self.storage.clear_rows([check_index(index, self.row_count, "index")])

    def clear_column(self, index: int) -> None:
        self.storage.clear_columns([check_index(index, self.column_count, "index")])

    def clear_sub_matrix(self, row_index: int, row_count: int, column_index: int, column_count: int) -> None:
        check_range(row_index, row_count, self.row_count, "row_index")
        check_range(column_index, column_count, self.column_count, "column_index")
        self.storage.clear_region(row_index, row_count, column_index, column_count)

    def iter_rows(self) -> Iterator[Vector]:
        for i in range(self.row_count):
            yield self.row(i)

    def iter_columns(self) -> Iterator[Vector]:
        for j in range(self.column_count):
            yield self.column(j)

    def diagonal(self) -> Vector:
        """The main diagonal as a vector of length min(row_count, column_count)."""
        count = min(self.row_count, self.column_count)
        result = self.create_vector(count)
        target = result.storage
        for i in range(count):
            target.set_at(i, self.storage.at(i, i))
        return result

    def set_diagonal(self, values: Vector | ArrayLike) -> None:
        """Overwrite the main diagonal; off-diagonal elements are unchanged."""
        count = min(self.row_count, self.column_count)
        source = self._vector_storage(values, count, "values")
        values = [source.at(i) for i in range(count)]
        for i, value in enumerate(values):
            self.storage.set_at(i, i, value)

    # ------------------------------------------------------------------
    # Sub-matrices
    # ------------------------------------------------------------------

    def sub_matrix(self, row_index: int, row_count: int, column_index: int, column_count: int,
                   result: Matrix | None = None) -> Matrix:
        """
        Copy of the block starting at (row_index, column_index).

        Raises:
            IndexOutOfRangeError: If the block leaves the matrix
            ValidationError: If a count is less than 1
        """
        check_range(row_index, row_count, self.row_count, "row_index")
        check_range(column_index, column_count, self.column_count, "column_index")
        if result is None:
            result = self.create_matrix(row_count, column_count, fully_mutable=True)
            skip_clearing = True
        else:
            self._check_matrix(result, "result")
            check_shape(result, row_count, column_count, "result")
            skip_clearing = False
        self.storage.copy_sub_matrix_to(result.storage, row_index, 0, row_count,
                                        column_index, 0, column_count, skip_clearing)
        return result

    def set_sub_matrix(self, row_index: int, row_count: int, column_index: int, column_count: int,
                       sub_matrix: Matrix) -> None:
        """
        Overwrite a block from the top-left corner of sub_matrix.

        Raises:
            IndexOutOfRangeError: If the block leaves either matrix
            StructurallyUnsupportedError: If the storage cannot hold the values
        """
        self._check_matrix(sub_matrix, "sub_matrix")
        check_range(row_index, row_count, self.row_count, "row_index")
        check_range(column_index, column_count, self.column_count, "column_index")
        check_range(0, row_count, sub_matrix.row_count, "row_count")
        check_range(0, column_count, sub_matrix.column_count, "column_count")
        sub_matrix.storage.copy_sub_matrix_to(self.storage, 0, row_index, row_count,
                                              0, column_index, column_count)

    # ------------------------------------------------------------------
    # Insertion and concatenation
    # ------------------------------------------------------------------

    def insert_row(self, index: int, values: Vector | ArrayLike, result: Matrix | None = None) -> Matrix:
        """
        New matrix with values inserted as row index (0 <= index <= row_count).

        Raises:
            IndexOutOfRangeError: If index > row_count
            DimensionError: If values does not have column_count elements
        """
        index = check_index(index, self.row_count + 1, "index")
        source = self._vector_storage(values, self.column_count, "values")
        rows, columns = self.row_count + 1, self.column_count
        result = self._composed_result(result, rows, columns)

        def compute(target: Matrix) -> None:
            target.clear()
            if index > 0:
                self.storage.copy_sub_matrix_to(target.storage, 0, 0, index, 0, 0, columns, True)
            if index < self.row_count:
                self.storage.copy_sub_matrix_to(target.storage, index, index + 1, self.row_count - index,
                                                0, 0, columns, True)
            source.copy_to_row(target.storage, index, True)

        self._write_through(result, compute)
        return result

    def insert_column(self, index: int, values: Vector | ArrayLike, result: Matrix | None = None) -> Matrix:
        """New matrix with values inserted as column index (0 <= index <= column_count)."""
        index = check_index(index, self.column_count + 1, "index")
        source = self._vector_storage(values, self.row_count, "values")
        rows, columns = self.row_count, self.column_count + 1
        result = self._composed_result(result, rows, columns)

        def compute(target: Matrix) -> None:
            target.clear()
            if index > 0:
                self.storage.copy_sub_matrix_to(target.storage, 0, 0, rows, 0, 0, index, True)
            if index < self.column_count:
                self.storage.copy_sub_matrix_to(target.storage, 0, 0, rows, index, index + 1,
                                                self.column_count - index, True)
            source.copy_to_column(target.storage, index, True)

        self._write_through(result, compute)
        return result

    def append(self, right: Matrix, result: Matrix | None = None) -> Matrix:
        """
        [self | right], side by side.

        Raises:
            DimensionError: If the row counts differ
        """
        self._check_matrix(right, "right")
        if right.row_count != self.row_count:
            raise DimensionError(
                f"right: row counts differ ({self.row_count} vs {right.row_count})",
                name="right", expected=self.row_count, actual=right.row_count,
            )
        rows, columns = self.row_count, self.column_count + right.column_count
        result = self._composed_result(result, rows, columns)

        def compute(target: Matrix) -> None:
            target.clear()
            self.storage.copy_sub_matrix_to(target.storage, 0, 0, rows, 0, 0, self.column_count, True)
            right.storage.copy_sub_matrix_to(target.storage, 0, 0, rows, 0, self.column_count,
                                             right.column_count, True)

        self._write_through(result, compute, right)
        return result

    def stack(self, lower: Matrix, result: Matrix | None = None) -> Matrix:
        """
        [self; lower], one above the other.

        Raises:
            DimensionError: If the column counts differ
        """
        self._check_matrix(lower, "lower")
        if lower.column_count != self.column_count:
            raise DimensionError(
                f"lower: column counts differ ({self.column_count} vs {lower.column_count})",
                name="lower", expected=self.column_count, actual=lower.column_count,
            )
        rows, columns = self.row_count + lower.row_count, self.column_count
        result = self._composed_result(result, rows, columns)

        def compute(target: Matrix) -> None:
            target.clear()
            self.storage.copy_sub_matrix_to(target.storage, 0, 0, self.row_count, 0, 0, columns, True)
            lower.storage.copy_sub_matrix_to(target.storage, 0, self.row_count, lower.row_count,
                                             0, 0, columns, True)

        self._write_through(result, compute, lower)
        return result

    def diagonal_stack(self, lower: Matrix, result: Matrix | None = None) -> Matrix:
        """Block-diagonal [self 0; 0 lower]."""
        self._check_matrix(lower, "lower")
        rows = self.row_count + lower.row_count
        columns = self.column_count + lower.column_count
        result = self._composed_result(result, rows, columns)

        def compute(target: Matrix) -> None:
            target.clear()
            self.storage.copy_sub_matrix_to(target.storage, 0, 0, self.row_count,
                                            0, 0, self.column_count, True)
            lower.storage.copy_sub_matrix_to(target.storage, 0, self.row_count, lower.row_count,
                                             0, self.column_count, lower.column_count, True)

        self._write_through(result, compute, lower)
        return result

    def _composed_result(self, result: Matrix | None, rows: int, columns: int) -> Matrix:
        if result is None:
            return self.create_matrix(rows, columns, fully_mutable=True)
        self._check_matrix(result, "result")
        check_shape(result, rows, columns, "result")
        return result

    # ------------------------------------------------------------------
    # Triangles
    # ------------------------------------------------------------------

    def upper_triangle(self, result: Matrix | None = None) -> Matrix:
        """Elements on and above the diagonal; everything below is zero."""
        return self._triangle(result, lambda i, j: j >= i)

    def lower_triangle(self, result: Matrix | None = None) -> Matrix:
        """Elements on and below the diagonal."""
        return self._triangle(result, lambda i, j: i >= j)

    def strictly_upper_triangle(self, result: Matrix | None = None) -> Matrix:
        return self._triangle(result, lambda i, j: j > i)

    def strictly_lower_triangle(self, result: Matrix | None = None) -> Matrix:
        return self._triangle(result, lambda i, j: i > j)

    def _triangle(self, result: Matrix | None, keep) -> Matrix:
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        else:
            self._check_matrix(result, "result")
            check_shape(result, self.row_count, self.column_count, "result")
            check_structure_fits(result, (self,), "result")
        entries = [(i, j, v) for i, j, v in self.storage.enumerate_nonzero_indexed() if keep(i, j)]
        target = result.storage
        target.validate_receivable(entries, "result")
        target.clear()
        for i, j, value in entries:
            target.set_at(i, j, value)
        return result

    # ------------------------------------------------------------------
    # Permutation and normalization
    # ------------------------------------------------------------------

    def permute_rows(self, permutation: Permutation) -> None:
        """
        Move row i to position permutation[i], in place.

        Raises:
            StructurallyUnsupportedError: If the storage cannot be permuted
            DimensionError: If the permutation size differs from row_count
        """
        self._check_permutation(permutation, self.row_count, "permutation")
        for i, k in enumerate(permutation.to_inversions()):
            if k != i:
                self._swap_rows(i, k)

    def permute_columns(self, permutation: Permutation) -> None:
        """Move column j to position permutation[j], in place."""
        self._check_permutation(permutation, self.column_count, "permutation")
        for j, k in enumerate(permutation.to_inversions()):
            if k != j:
                self._swap_columns(j, k)

    def _check_permutation(self, permutation: Any, dimension: int, name: str) -> None:
        check_not_none(permutation, name)
        if not isinstance(permutation, Permutation):
            raise ValidationError(f"{name}: expected a Permutation, got {type(permutation).__name__}")
        if not self.storage.supports(CAPABILITY_PERMUTABLE):
            raise StructurallyUnsupportedError(
                f"{type(self.storage).__name__} does not support in-place permutation",
                storage=type(self.storage).__name__,
                capability=CAPABILITY_PERMUTABLE,
            )
        if permutation.dimension != dimension:
            raise DimensionError(
                f"{name}: expected dimension {dimension}, got {permutation.dimension}",
                name=name, expected=dimension, actual=permutation.dimension,
            )

    def _swap_rows(self, a: int, b: int) -> None:
        storage = self.storage
        for j in range(self.column_count):
            first, second = storage.at(a, j), storage.at(b, j)
            storage.set_at(a, j, second)
            storage.set_at(b, j, first)

    def _swap_columns(self, a: int, b: int) -> None:
        storage = self.storage
        for i in range(self.row_count):
            first, second = storage.at(i, a), storage.at(i, b)
            storage.set_at(i, a, second)
            storage.set_at(i, b, first)

    def normalize_rows(self, p: float) -> Matrix:
        """
        Copy with every row scaled to unit p-norm.

        Raises:
            ValidationError: If p < 1
            DivideByZeroError: If a row is all zeros
        """
        p = check_norm_order(p)
        result = self.clone()
        for i in range(self.row_count):
            result.set_row(i, self.row(i).normalize(p))
        return result

    def normalize_columns(self, p: float) -> Matrix:
        """Copy with every column scaled to unit p-norm."""
        p = check_norm_order(p)
        result = self.clone()
        for j in range(self.column_count):
            result.set_column(j, self.column(j).normalize(p))
        return result

    # ------------------------------------------------------------------
    # Construction from rows or columns
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Vector | ArrayLike], dtype: Any = None) -> Matrix:
        """
        Build a matrix whose i-th row is rows[i].

        Raises:
            ValidationError: If rows is empty
            DimensionError: If the rows differ in length
        """
        arrays, ops = cls._collect(rows, "rows", dtype)
        matrix = cls.zeros(len(arrays), arrays[0].shape[0], ops)
        for i, values in enumerate(arrays):
            matrix.set_row(i, values)
        return matrix

    @classmethod
    def from_columns(cls, columns: Sequence[Vector | ArrayLike], dtype: Any = None) -> Matrix:
        """Build a matrix whose j-th column is columns[j]."""
        arrays, ops = cls._collect(columns, "columns", dtype)
        matrix = cls.zeros(arrays[0].shape[0], len(arrays), ops)
        for j, values in enumerate(arrays):
            matrix.set_column(j, values)
        return matrix

    @staticmethod
    def _collect(items: Sequence[Any], name: str, dtype: Any):
        check_not_none(items, name)
        arrays = [
            item.to_array() if isinstance(getattr(item, "storage", None), VectorStorage)
            else np.asarray(item)
            for item in items
        ]
        if not arrays:
            raise ValidationError(f"{name}: at least one entry is required")
        length = arrays[0].shape[0] if arrays[0].ndim == 1 else None
        for k, array in enumerate(arrays):
            if array.ndim != 1 or array.shape[0] != length:
                raise DimensionError(
                    f"{name}[{k}]: expected {length} elements, got shape {array.shape}",
                    name=f"{name}[{k}]", expected=length, actual=array.shape,
                )
        if dtype is None:
            dtype = np.result_type(*arrays)
        return arrays, scalar_ops_for(dtype)

"""
Matrix base class.

The public arithmetic methods validate their operands completely, apply
the scalar-identity short-circuits, guard against aliasing, and only then
call an unchecked _do_* hook. The default hooks work through the storage
contract alone (element loops, or a NumPy product of materialized
arrays); concrete representations override them with fast paths.

Design principles:
    - Nothing is written to a caller-supplied result before validation passes
    - A result sharing storage with an operand of a product is computed
      into a temporary created by the result's factory, then copied
    - A result whose storage is not fully mutable only accepts values
      derived from operands of the same storage structure
    - Derived quantities (rank, determinant, ...) build a fresh
      factorization on every call
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

import numpy as np
from numpy.typing import NDArray

from pylinalg.core.exceptions import DimensionError, ValidationError
from pylinalg.core.scalars import ScalarOps, is_scalar
from pylinalg.core.tolerances import ToleranceTier, select_tolerance
from pylinalg.core.validation import (
    check_count,
    check_index,
    check_nonzero_divisor,
    check_not_none,
    check_same_element_type,
    check_same_shape,
    check_shape,
    check_square,
    check_structure_fits,
)
from pylinalg.factorization import LU, SVD
from pylinalg.formatting import format_matrix
from pylinalg.matrix.composition import CompositionMixin
from pylinalg.matrix.operators import MatrixOperatorsMixin
from pylinalg.storage.base import MatrixStorage
from pylinalg.vector.base import Vector

logger = logging.getLogger(__name__)


class Matrix(MatrixOperatorsMixin, CompositionMixin, ABC):
    """
    Fixed-shape matrix over a pluggable storage.

    Attributes:
        storage: The owned MatrixStorage
    """

    # NumPy defers binary operators with a Matrix operand to us
    __array_ufunc__ = None

    def __init__(self, storage: MatrixStorage):
        check_not_none(storage, "storage")
        if not isinstance(storage, MatrixStorage):
            raise ValidationError(
                f"storage: expected a MatrixStorage, got {type(storage).__name__}"
            )
        self.storage = storage

    @property
    def row_count(self) -> int:
        return self.storage.row_count

    @property
    def column_count(self) -> int:
        return self.storage.column_count

    @property
    def shape(self) -> tuple[int, int]:
        return (self.storage.row_count, self.storage.column_count)

    @property
    def ops(self) -> ScalarOps:
        return self.storage.ops

    @property
    def dtype(self) -> np.dtype:
        return self.storage.ops.dtype

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls, rows: int, columns: int, dtype: ScalarOps | Any = np.float64) -> Matrix:
        """
        New zero matrix for the class-level constructors (from_rows, ...).

        Kinds without a storage of their own, such as GenericMatrix, get
        a dense matrix; concrete kinds override this.
        """
        from pylinalg.matrix.dense import DenseMatrix

        return DenseMatrix.zeros(rows, columns, dtype)

    @abstractmethod
    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> Matrix:
        """
        New zero matrix of this matrix's kind and element type.

        With fully_mutable, a structurally constrained kind (diagonal)
        returns a kind that can hold any value instead.
        """
        pass

    @abstractmethod
    def create_vector(self, size: int, fully_mutable: bool = False) -> Vector:
        """New zero vector of the matching kind and element type."""
        pass

    def _create_binary_result(self, other: Matrix, rows: int, columns: int) -> Matrix:
        if type(other) is type(self):
            return self.create_matrix(rows, columns)
        if other.storage.is_dense and not self.storage.is_dense:
            return other.create_matrix(rows, columns)
        return self.create_matrix(rows, columns, fully_mutable=True)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_matrix(self, other: Any, name: str) -> None:
        check_not_none(other, name)
        if not isinstance(other, Matrix):
            raise ValidationError(f"{name}: expected a Matrix, got {type(other).__name__}")
        check_same_element_type(self, other, name)

    def _check_vector(self, vector: Any, name: str) -> None:
        check_not_none(vector, name)
        if not isinstance(vector, Vector):
            raise ValidationError(f"{name}: expected a Vector, got {type(vector).__name__}")
        check_same_element_type(self, vector, name)

    def _check_result(self, result: Any, rows: int, columns: int, *operands: Matrix) -> None:
        self._check_matrix(result, "result")
        check_shape(result, rows, columns, "result")
        check_structure_fits(result, (self,) + operands, "result")

    def _check_result_vector(self, result: Any, count: int) -> None:
        self._check_vector(result, "result")
        check_count(result, count, "result")

    def _scalar(self, value: Any, name: str = "scalar") -> Any:
        check_not_none(value, name)
        return self.ops.coerce(value, name)

    @staticmethod
    def _aliases(result: Any, *operands: Any) -> bool:
        return any(result.storage.shares_memory_with(o.storage) for o in operands)

    def _copy_or_clone(self, result: Matrix | None) -> Matrix:
        if result is None:
            return self.clone()
        if result is not self:
            self.storage.copy_to(result.storage)
        return result

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def __getitem__(self, key: tuple[int, int]) -> Any:
        row, column = self._check_key(key)
        return self.storage.at(row, column)

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        row, column = self._check_key(key)
        self.storage.set_at(row, column, self._scalar(value, "value"))

    def _check_key(self, key: Any) -> tuple[int, int]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise ValidationError(f"key: expected a (row, column) tuple, got {key!r}")
        return (
            check_index(key[0], self.row_count, "row"),
            check_index(key[1], self.column_count, "column"),
        )

    def at(self, row: int, column: int) -> Any:
        """Unchecked read."""
        return self.storage.at(row, column)

    def set_at(self, row: int, column: int, value: Any) -> None:
        """Unchecked write."""
        self.storage.set_at(row, column, value)

    def clear(self) -> None:
        self.storage.clear()

    def clone(self) -> Matrix:
        result = self.create_matrix(self.row_count, self.column_count)
        self.storage.copy_to(result.storage, skip_clearing=True)
        return result

    def copy_to(self, target: Matrix) -> None:
        """
        Copy every element into target.

        Raises:
            DimensionError: If target has a different shape
            StructurallyUnsupportedError: If target cannot hold the values
        """
        self._check_matrix(target, "target")
        self.storage.copy_to(target.storage)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        """
        Elementwise sum.

        Args:
            other: Matrix of the same shape
            result: Optional destination of the same shape

        Raises:
            NullArgumentError: If other is None
            DimensionError: If a shape differs
        """
        self._check_matrix(other, "other")
        check_same_shape(self, other, "other")
        if result is None:
            result = self._create_binary_result(other, self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count, other)
        self._do_add(other, result)
        return result

    def subtract(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        """Elementwise difference self - other."""
        self._check_matrix(other, "other")
        check_same_shape(self, other, "other")
        if result is None:
            result = self._create_binary_result(other, self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count, other)
        self._do_subtract(other, result)
        return result

    def multiply(self, other: Any, result: Any = None) -> Any:
        """
        Scalar, matrix-vector or matrix-matrix product.

        Args:
            other: Scalar, Vector of length column_count, or Matrix with
                row_count equal to this matrix's column_count
            result: Optional destination of the product's shape

        Returns:
            Matrix for scalar and matrix operands, Vector for a vector operand

        Raises:
            NullArgumentError: If other is None
            DimensionError: If the inner dimensions or the result shape differ
        """
        check_not_none(other, "other")
        if isinstance(other, Vector):
            return self._multiply_vector(other, result)
        if isinstance(other, Matrix):
            return self._multiply_matrix(other, result)
        return self._multiply_scalar(self._scalar(other), result)

    def _multiply_scalar(self, scalar: Any, result: Matrix | None) -> Matrix:
        if result is not None:
            self._check_result(result, self.row_count, self.column_count)
        if self.ops.is_one(scalar):
            return self._copy_or_clone(result)
        if self.ops.is_zero(scalar):
            if result is None:
                return self.create_matrix(self.row_count, self.column_count)
            result.clear()
            return result
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        self._do_multiply_scalar(scalar, result)
        return result

    def _multiply_vector(self, vector: Vector, result: Vector | None) -> Vector:
        self._check_vector(vector, "other")
        check_count(vector, self.column_count, "other")
        if result is None:
            result = self.create_vector(self.row_count)
            self._do_multiply_vector(vector, result)
            return result
        self._check_result_vector(result, self.row_count)
        if self._aliases(result, vector):
            logger.debug("multiply: result aliases the vector operand, using a temporary")
            tmp = result.create_vector(result.count)
            self._do_multiply_vector(vector, tmp)
            tmp.storage.copy_to(result.storage)
        else:
            self._do_multiply_vector(vector, result)
        return result

    def _multiply_matrix(self, other: Matrix, result: Matrix | None) -> Matrix:
        self._check_matrix(other, "other")
        self._check_inner(self.column_count, other.row_count)
        rows, columns = self.row_count, other.column_count
        if result is None:
            result = self._create_binary_result(other, rows, columns)
            self._do_multiply_matrix(other, result)
            return result
        self._check_result(result, rows, columns, other)
        self._run_product(result, self._do_multiply_matrix, other)
        return result

    def transpose_and_multiply(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        """
        Product self @ other^T.

        Raises:
            DimensionError: If column counts differ or result has the wrong shape
        """
        self._check_matrix(other, "other")
        self._check_inner(self.column_count, other.column_count)
        rows, columns = self.row_count, other.row_count
        if result is None:
            result = self._create_binary_result(other, rows, columns)
            self._do_transpose_and_multiply(other, result)
            return result
        self._check_result(result, rows, columns, other)
        self._run_product(result, self._do_transpose_and_multiply, other)
        return result

    def transpose_this_and_multiply(self, other: Any, result: Any = None) -> Any:
        """
        Product self^T @ other for a Vector or Matrix operand.

        Raises:
            DimensionError: If row counts differ or result has the wrong shape
        """
        check_not_none(other, "other")
        if isinstance(other, Vector):
            self._check_vector(other, "other")
            check_count(other, self.row_count, "other")
            if result is None:
                result = self.create_vector(self.column_count)
                self._do_transpose_this_and_multiply_vector(other, result)
                return result
            self._check_result_vector(result, self.column_count)
            if self._aliases(result, other):
                logger.debug("transpose_this_and_multiply: result aliases operand, using a temporary")
                tmp = result.create_vector(result.count)
                self._do_transpose_this_and_multiply_vector(other, tmp)
                tmp.storage.copy_to(result.storage)
            else:
                self._do_transpose_this_and_multiply_vector(other, result)
            return result

        self._check_matrix(other, "other")
        self._check_inner(self.row_count, other.row_count)
        rows, columns = self.column_count, other.column_count
        if result is None:
            result = self._create_binary_result(other, rows, columns)
            self._do_transpose_this_and_multiply_matrix(other, result)
            return result
        self._check_result(result, rows, columns, other)
        self._run_product(result, self._do_transpose_this_and_multiply_matrix, other)
        return result

    def left_multiply(self, vector: Vector, result: Vector | None = None) -> Vector:
        """
        Row-vector product vector^T @ self.

        Raises:
            DimensionError: If vector.count != row_count or result.count != column_count
        """
        self._check_vector(vector, "vector")
        check_count(vector, self.row_count, "vector")
        if result is None:
            result = self.create_vector(self.column_count)
            self._do_left_multiply(vector, result)
            return result
        self._check_result_vector(result, self.column_count)
        if self._aliases(result, vector):
            logger.debug("left_multiply: result aliases the vector operand, using a temporary")
            tmp = result.create_vector(result.count)
            self._do_left_multiply(vector, tmp)
            tmp.storage.copy_to(result.storage)
        else:
            self._do_left_multiply(vector, result)
        return result

    def _check_inner(self, left: int, right: int) -> None:
        if left != right:
            raise DimensionError(
                f"other: inner dimensions do not match ({left} vs {right})",
                name="other", expected=left, actual=right,
            )

    def _run_product(self, result: Matrix, hook: Callable[[Matrix, Matrix], None], other: Matrix) -> None:
        if self._aliases(result, self, other):
            logger.debug("%s: result aliases an operand, using a temporary", hook.__name__)
            tmp = result.create_matrix(result.row_count, result.column_count)
            hook(other, tmp)
            tmp.storage.copy_to(result.storage)
        else:
            hook(other, result)

    def divide(self, scalar: Any, result: Matrix | None = None) -> Matrix:
        """
        Divide every element by a scalar.

        Raises:
            DivideByZeroError: If scalar is zero
        """
        scalar = self._scalar(scalar)
        if result is not None:
            self._check_result(result, self.row_count, self.column_count)
        check_nonzero_divisor(self.ops, scalar, "scalar")
        if self.ops.is_one(scalar):
            return self._copy_or_clone(result)
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        self._do_divide_scalar(scalar, result)
        return result

    def modulus(self, divisor: Any, result: Matrix | None = None) -> Matrix:
        """
        Canonical modulus of every element (sign of the divisor).

        Raises:
            DivideByZeroError: If divisor is zero
            NotSupportedError: For complex elements
        """
        divisor = self._scalar(divisor, "divisor")
        if result is not None:
            self._check_result(result, self.row_count, self.column_count)
        self.ops.require_ordered("modulus")
        check_nonzero_divisor(self.ops, divisor, "divisor")
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        self._do_modulus(divisor, result)
        return result

    def negate(self, result: Matrix | None = None) -> Matrix:
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count)
        self._do_negate(result)
        return result

    def conjugate(self, result: Matrix | None = None) -> Matrix:
        if result is None:
            result = self.create_matrix(self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count)
        self._do_conjugate(result)
        return result

    def pointwise_multiply(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        self._check_matrix(other, "other")
        check_same_shape(self, other, "other")
        if result is None:
            result = self._create_binary_result(other, self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count, other)
        self._do_pointwise_multiply(other, result)
        return result

    def pointwise_divide(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        """Elementwise quotient; zero divisors follow IEEE semantics."""
        self._check_matrix(other, "other")
        check_same_shape(self, other, "other")
        if result is None:
            result = self._create_binary_result(other, self.row_count, self.column_count)
        else:
            self._check_result(result, self.row_count, self.column_count, other)
        self._do_pointwise_divide(other, result)
        return result

    def pointwise_modulus(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        self._check_matrix(other, "other")
        check_same_shape(self, other, "other")
        if result is not None:
            self._check_result(result, self.row_count, self.column_count, other)
        self.ops.require_ordered("pointwise_modulus")
        if result is None:
            result = self._create_binary_result(other, self.row_count, self.column_count)
        self._do_pointwise_modulus(other, result)
        return result

    def kronecker_product(self, other: Matrix, result: Matrix | None = None) -> Matrix:
        """
        Kronecker product: block (i, j) of the result is self[i, j] * other.

        Raises:
            DimensionError: If result is not (rows * other.rows, columns * other.columns)
        """
        self._check_matrix(other, "other")
        rows = self.row_count * other.row_count
        columns = self.column_count * other.column_count
        if result is None:
            result = self.create_matrix(rows, columns, fully_mutable=True)
        else:
            self._check_matrix(result, "result")
            check_shape(result, rows, columns, "result")
        self._write_through(result, lambda target: self._do_kronecker_product(other, target), other)
        return result

    def _write_through(self, result: Matrix, compute: Callable[[Matrix], None], *operands: Matrix) -> None:
        """
        Run compute against result directly, or against a fully mutable
        temporary when result is constrained or aliased, then copy.
        """
        if result.storage.is_fully_mutable and not self._aliases(result, self, *operands):
            compute(result)
            return
        tmp = self.create_matrix(result.row_count, result.column_count, fully_mutable=True)
        compute(tmp)
        tmp.storage.copy_to(result.storage)

    # ------------------------------------------------------------------
    # Default hooks (unchecked)
    # ------------------------------------------------------------------

    def _map_into(self, result: Matrix, f: Callable[[Any], Any]) -> None:
        source = self.storage
        entries = [(i, j, f(v)) for i, j, v in source.enumerate_indexed()]
        target = result.storage
        for i, j, value in entries:
            target.set_at(i, j, value)

    def _zip_into(self, other: Matrix, result: Matrix, f: Callable[[Any, Any], Any]) -> None:
        a, b = self.storage, other.storage
        entries = [(i, j, f(v, b.at(i, j))) for i, j, v in a.enumerate_indexed()]
        target = result.storage
        for i, j, value in entries:
            target.set_at(i, j, value)

    def _do_add(self, other: Matrix, result: Matrix) -> None:
        self._zip_into(other, result, self.ops.add)

    def _do_subtract(self, other: Matrix, result: Matrix) -> None:
        self._zip_into(other, result, self.ops.subtract)

    def _do_multiply_scalar(self, scalar: Any, result: Matrix) -> None:
        self._map_into(result, lambda x: self.ops.multiply(x, scalar))

    def _do_divide_scalar(self, scalar: Any, result: Matrix) -> None:
        self._map_into(result, lambda x: self.ops.divide(x, scalar))

    def _do_modulus(self, divisor: Any, result: Matrix) -> None:
        self._map_into(result, lambda x: self.ops.modulus(x, divisor))

    def _do_negate(self, result: Matrix) -> None:
        self._map_into(result, self.ops.negate)

    def _do_conjugate(self, result: Matrix) -> None:
        self._map_into(result, self.ops.conjugate)

    def _do_pointwise_multiply(self, other: Matrix, result: Matrix) -> None:
        self._zip_into(other, result, self.ops.multiply)

    def _do_pointwise_divide(self, other: Matrix, result: Matrix) -> None:
        self._zip_into(other, result, self.ops.divide)

    def _do_pointwise_modulus(self, other: Matrix, result: Matrix) -> None:
        self._zip_into(other, result, self.ops.modulus)

    def _do_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self.to_array() @ vector.to_array())

    def _do_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self.to_array() @ other.to_array())

    def _do_transpose_and_multiply(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self.to_array() @ other.to_array().T)

    def _do_transpose_this_and_multiply_vector(self, vector: Vector, result: Vector) -> None:
        result.storage.set_from_array(self.to_array().T @ vector.to_array())

    def _do_transpose_this_and_multiply_matrix(self, other: Matrix, result: Matrix) -> None:
        result.storage.set_from_array(self.to_array().T @ other.to_array())

    def _do_left_multiply(self, vector: Vector, result: Vector) -> None:
        self._do_transpose_this_and_multiply_vector(vector, result)

    def _do_kronecker_product(self, other: Matrix, result: Matrix) -> None:
        rows, columns = other.row_count, other.column_count
        for j in range(self.column_count):
            for i in range(self.row_count):
                block = other.multiply(self.storage.at(i, j))
                result.set_sub_matrix(i * rows, rows, j * columns, columns, block)

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------

    def trace(self) -> Any:
        """
        Sum of the diagonal.

        Raises:
            NotSquareError: If the matrix is not square
        """
        check_square(self, "matrix")
        ops = self.ops
        total = ops.zero
        for i in range(self.row_count):
            total = ops.add(total, self.storage.at(i, i))
        return total

    def rank(self) -> int:
        """Numerical rank from a fresh SVD."""
        return SVD.create(self).rank

    def condition_number(self) -> float:
        """Ratio of largest to smallest singular value from a fresh SVD."""
        return SVD.create(self).condition_number

    def l2_norm(self) -> float:
        """Spectral norm (largest singular value)."""
        return SVD.create(self).norm2

    def determinant(self) -> Any:
        """
        Determinant from a fresh LU factorization.

        Raises:
            NotSquareError: If the matrix is not square
        """
        check_square(self, "matrix")
        return self.ops.dtype.type(LU.create(self).determinant)

    def inverse(self) -> Matrix:
        """
        Inverse from a fresh LU factorization.

        Raises:
            NotSquareError: If the matrix is not square
            SingularMatrixError: If the matrix is singular
        """
        check_square(self, "matrix")
        inverse = LU.create(self).inverse()
        result = self.create_matrix(self.row_count, self.column_count, fully_mutable=True)
        result.storage.set_from_array(inverse.astype(self.ops.dtype, copy=False))
        return result

    def l1_norm(self) -> float:
        """Maximum absolute column sum."""
        return float(np.abs(self.to_array()).sum(axis=0).max())

    def infinity_norm(self) -> float:
        """Maximum absolute row sum."""
        return float(np.abs(self.to_array()).sum(axis=1).max())

    def frobenius_norm(self) -> float:
        magnitudes = np.abs(self.to_array())
        return float(math.sqrt(float(np.sum(magnitudes * magnitudes))))

    def is_symmetric(self) -> bool:
        """True for a square matrix equal to its transpose."""
        if self.row_count != self.column_count:
            return False
        at = self.storage.at
        return all(
            at(i, j) == at(j, i)
            for j in range(self.column_count)
            for i in range(j + 1, self.row_count)
        )

    # ------------------------------------------------------------------
    # Conversions, comparison and display
    # ------------------------------------------------------------------

    def to_array(self) -> NDArray[Any]:
        """New (row_count, column_count) NumPy array."""
        return self.storage.to_array()

    def to_column_major_array(self) -> NDArray[Any]:
        return self.storage.to_array().reshape(-1, order='F')

    def to_row_major_array(self) -> NDArray[Any]:
        return self.storage.to_array().reshape(-1, order='C')

    def enumerate_indexed(self) -> Iterable[tuple[int, int, Any]]:
        return self.storage.enumerate_indexed()

    def enumerate_nonzero_indexed(self) -> Iterable[tuple[int, int, Any]]:
        return self.storage.enumerate_nonzero_indexed()

    def __iter__(self):
        """Elements in column-major order."""
        return self.storage.enumerate()

    def map_inplace(self, f: Callable[[Any], Any], include_zeros: bool = True) -> None:
        self.storage.map_inplace(f, include_zeros)

    def map_indexed_inplace(self, f: Callable[[int, int, Any], Any], include_zeros: bool = True) -> None:
        self.storage.map_indexed_inplace(f, include_zeros)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.storage == other.storage

    def __hash__(self) -> int:
        return hash(self.storage)

    def almost_equal(self, other: Matrix, tolerance: ToleranceTier | None = None) -> bool:
        """Elementwise comparison within the element type's tolerance tier."""
        self._check_matrix(other, "other")
        if self.shape != other.shape:
            return False
        tier = tolerance or select_tolerance(self.ops)
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=tier.rtol, atol=tier.atol))

    def __str__(self) -> str:
        return format_matrix(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.row_count}x{self.column_count}, {self.ops.name})"

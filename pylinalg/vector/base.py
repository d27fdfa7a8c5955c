"""
Vector base class.

Every arithmetic operation comes in one validated public method taking an
optional ``result``. Without ``result`` a new vector of this vector's kind
is returned; with it, the values are written into ``result``, which is
also returned (the NumPy ``out=`` convention).

Design principles:
    - Public methods validate completely before the first write
    - Scalar identities short-circuit: adding zero copies, multiplying by
      one copies, multiplying by zero clears
    - The unchecked _do_* hooks assume validated input; the defaults here
      loop over elements through the storage contract and concrete
      representations override them with bulk fast paths
    - Reductions that combine several elements route an aliased result
      through a temporary of the same kind
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinalg.core.exceptions import DimensionError, DivideByZeroError, ValidationError
from pylinalg.core.parallel import parallel_for
from pylinalg.core.scalars import ScalarOps, is_scalar
from pylinalg.core.tolerances import ToleranceTier, select_tolerance
from pylinalg.core.validation import (
    check_count,
    check_index,
    check_nonzero_divisor,
    check_norm_order,
    check_not_none,
    check_range,
    check_same_element_type,
)
from pylinalg.formatting import format_vector
from pylinalg.storage.base import VectorStorage
from pylinalg.vector.operators import VectorOperatorsMixin

if TYPE_CHECKING:
    from pylinalg.matrix.base import Matrix

logger = logging.getLogger(__name__)


class Vector(VectorOperatorsMixin, ABC):
    """
    Fixed-length vector over a pluggable storage.

    Attributes:
        storage: The owned VectorStorage
    """

    # NumPy defers binary operators with a Vector operand to us
    __array_ufunc__ = None

    def __init__(self, storage: VectorStorage):
        check_not_none(storage, "storage")
        if not isinstance(storage, VectorStorage):
            raise ValidationError(
                f"storage: expected a VectorStorage, got {type(storage).__name__}"
            )
        self.storage = storage

    @property
    def count(self) -> int:
        """Number of elements."""
        return self.storage.length

    @property
    def ops(self) -> ScalarOps:
        """Element type strategy."""
        return self.storage.ops

    @property
    def dtype(self) -> np.dtype:
        return self.storage.ops.dtype

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @abstractmethod
    def create_vector(self, size: int, fully_mutable: bool = False) -> Vector:
        """New zero vector of this vector's kind and element type."""
        pass

    @abstractmethod
    def create_matrix(self, rows: int, columns: int, fully_mutable: bool = False) -> Matrix:
        """New zero matrix of the matching kind and element type."""
        pass

    def _create_binary_result(self, other: Vector) -> Vector:
        # a dense operand forces a dense result
        if self.storage.is_dense or not other.storage.is_dense:
            return self.create_vector(self.count, fully_mutable=type(other) is not type(self))
        return other.create_vector(self.count)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_operand(self, other: Any, name: str) -> None:
        check_not_none(other, name)
        if not isinstance(other, Vector):
            raise ValidationError(f"{name}: expected a Vector, got {type(other).__name__}")
        check_count(other, self.count, name)
        check_same_element_type(self, other, name)

    def _check_result(self, result: Any) -> None:
        self._check_operand(result, "result")

    def _scalar(self, value: Any, name: str = "scalar") -> Any:
        check_not_none(value, name)
        return self.ops.coerce(value, name)

    def _aliases(self, result: Vector, *operands: Vector) -> bool:
        return any(result.storage.shares_memory_with(o.storage) for o in operands)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> Any:
        return self.storage.at(check_index(index, self.count, "index"))

    def __setitem__(self, index: int, value: Any) -> None:
        index = check_index(index, self.count, "index")
        self.storage.set_at(index, self._scalar(value, "value"))

    def at(self, index: int) -> Any:
        """Unchecked read."""
        return self.storage.at(index)

    def set_at(self, index: int, value: Any) -> None:
        """Unchecked write."""
        self.storage.set_at(index, value)

    def clear(self) -> None:
        self.storage.clear()

    def clear_sub_vector(self, index: int, count: int) -> None:
        check_range(index, count, self.count, "index")
        self.storage.clear_range(index, count)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: Any, result: Vector | None = None) -> Vector:
        """
        Add a scalar to every element, or add another vector.

        Args:
            other: Scalar or Vector of the same size
            result: Optional destination of the same size

        Returns:
            The result vector

        Raises:
            NullArgumentError: If other is None
            DimensionError: If a size differs
        """
        check_not_none(other, "other")
        if is_scalar(other):
            scalar = self._scalar(other)
            if result is not None:
                self._check_result(result)
            if self.ops.is_zero(scalar):
                return self._copy_or_clone(result)
            if result is None:
                result = self.create_vector(self.count)
            self._do_add_scalar(scalar, result)
            return result

        self._check_operand(other, "other")
        if result is None:
            result = self._create_binary_result(other)
        else:
            self._check_result(result)
        self._do_add(other, result)
        return result

    def subtract(self, other: Any, result: Vector | None = None) -> Vector:
        """Subtract a scalar from every element, or subtract another vector."""
        check_not_none(other, "other")
        if is_scalar(other):
            scalar = self._scalar(other)
            if result is not None:
                self._check_result(result)
            if self.ops.is_zero(scalar):
                return self._copy_or_clone(result)
            if result is None:
                result = self.create_vector(self.count)
            self._do_subtract_scalar(scalar, result)
            return result

        self._check_operand(other, "other")
        if result is None:
            result = self._create_binary_result(other)
        else:
            self._check_result(result)
        self._do_subtract(other, result)
        return result

    def subtract_from(self, scalar: Any, result: Vector | None = None) -> Vector:
        """Compute scalar - v[i] for every element."""
        scalar = self._scalar(scalar)
        if result is None:
            result = self.create_vector(self.count)
            self._do_subtract_from(scalar, result)
            return result
        self._check_result(result)
        if result is not self and self._aliases(result, self):
            logger.debug("subtract_from: result aliases operand, using a temporary")
            tmp = result.create_vector(result.count)
            self._do_subtract_from(scalar, tmp)
            tmp.storage.copy_to(result.storage)
            return result
        self._do_subtract_from(scalar, result)
        return result

    def negate(self, result: Vector | None = None) -> Vector:
        if result is None:
            result = self.create_vector(self.count)
        else:
            self._check_result(result)
        self._do_negate(result)
        return result

    def conjugate(self, result: Vector | None = None) -> Vector:
        """Complex conjugate of every element; a copy for real elements."""
        if result is None:
            result = self.create_vector(self.count)
        else:
            self._check_result(result)
        self._do_conjugate(result)
        return result

    def multiply(self, scalar: Any, result: Vector | None = None) -> Vector:
        """
        Multiply every element by a scalar.

        Multiplying by one copies; multiplying by zero yields (or clears
        result to) the zero vector without visiting the elements.
        """
        scalar = self._scalar(scalar)
        if result is not None:
            self._check_result(result)
        if self.ops.is_one(scalar):
            return self._copy_or_clone(result)
        if self.ops.is_zero(scalar):
            if result is None:
                return self.create_vector(self.count)
            result.clear()
            return result
        if result is None:
            result = self.create_vector(self.count)
        self._do_multiply(scalar, result)
        return result

    def divide(self, scalar: Any, result: Vector | None = None) -> Vector:
        """
        Divide every element by a scalar.

        Raises:
            DivideByZeroError: If scalar is zero
        """
        scalar = self._scalar(scalar)
        if result is not None:
            self._check_result(result)
        check_nonzero_divisor(self.ops, scalar, "scalar")
        if self.ops.is_one(scalar):
            return self._copy_or_clone(result)
        if result is None:
            result = self.create_vector(self.count)
        self._do_divide(scalar, result)
        return result

    def divide_by_this(self, scalar: Any, result: Vector | None = None) -> Vector:
        """Compute scalar / v[i] for every element (IEEE semantics for zeros)."""
        scalar = self._scalar(scalar)
        if result is None:
            result = self.create_vector(self.count)
        else:
            self._check_result(result)
        self._do_divide_by_this(scalar, result)
        return result

    def modulus(self, divisor: Any, result: Vector | None = None) -> Vector:
        """
        Canonical modulus v[i] mod divisor (sign of the divisor).

        Raises:
            DivideByZeroError: If divisor is zero
            NotSupportedError: For complex elements
        """
        divisor = self._scalar(divisor, "divisor")
        if result is not None:
            self._check_result(result)
        self.ops.require_ordered("modulus")
        check_nonzero_divisor(self.ops, divisor, "divisor")
        if result is None:
            result = self.create_vector(self.count)
        self._do_modulus(divisor, result)
        return result

    def modulus_by_this(self, dividend: Any, result: Vector | None = None) -> Vector:
        """Canonical modulus dividend mod v[i] for every element."""
        dividend = self._scalar(dividend, "dividend")
        if result is not None:
            self._check_result(result)
        self.ops.require_ordered("modulus_by_this")
        if result is None:
            result = self.create_vector(self.count)
        self._do_modulus_by_this(dividend, result)
        return result

    def dot_product(self, other: Vector) -> Any:
        """
        Sum of v[i] * other[i] (no conjugation).

        Raises:
            NullArgumentError: If other is None
            DimensionError: If the sizes differ
        """
        self._check_operand(other, "other")
        return self._do_dot_product(other)

    def conjugate_dot_product(self, other: Vector) -> Any:
        """Sum of conj(v[i]) * other[i]."""
        self._check_operand(other, "other")
        return self._do_conjugate_dot_product(other)

    def pointwise_multiply(self, other: Vector, result: Vector | None = None) -> Vector:
        self._check_operand(other, "other")
        if result is None:
            result = self._create_binary_result(other)
        else:
            self._check_result(result)
        self._do_pointwise_multiply(other, result)
        return result

    def pointwise_divide(self, other: Vector, result: Vector | None = None) -> Vector:
        """Elementwise quotient; zero divisors follow IEEE semantics."""
        self._check_operand(other, "other")
        if result is None:
            result = self._create_binary_result(other)
        else:
            self._check_result(result)
        self._do_pointwise_divide(other, result)
        return result

    def pointwise_modulus(self, other: Vector, result: Vector | None = None) -> Vector:
        self._check_operand(other, "other")
        if result is not None:
            self._check_result(result)
        self.ops.require_ordered("pointwise_modulus")
        if result is None:
            result = self._create_binary_result(other)
        self._do_pointwise_modulus(other, result)
        return result

    def outer_product(self, other: Vector) -> Matrix:
        """
        Outer product u * v^T with u = self.

        Usable as ``Vector.outer_product(u, v)`` or ``u.outer_product(v)``.
        The matrix is created by u's factory; row i is v scaled by u[i].
        """
        self._check_outer_operand(other)
        matrix = self.create_matrix(self.count, other.count)
        for i in range(self.count):
            matrix.set_row(i, other.multiply(self.storage.at(i)))
        return matrix

    def _check_outer_operand(self, other: Any) -> None:
        check_not_none(other, "other")
        if not isinstance(other, Vector):
            raise ValidationError(f"other: expected a Vector, got {type(other).__name__}")
        check_same_element_type(self, other, "other")

    def _copy_or_clone(self, result: Vector | None) -> Vector:
        if result is None:
            return self.clone()
        if result is not self:
            self.storage.copy_to(result.storage)
        return result

    # ------------------------------------------------------------------
    # Unchecked hooks
    # ------------------------------------------------------------------

    def _map_into(self, result: Vector, f: Callable[[Any], Any]) -> None:
        source, target = self.storage, result.storage
        values = [f(source.at(i)) for i in range(self.count)]
        for i, value in enumerate(values):
            target.set_at(i, value)

    def _zip_into(self, other: Vector, result: Vector, f: Callable[[Any, Any], Any]) -> None:
        a, b, target = self.storage, other.storage, result.storage
        values = [f(a.at(i), b.at(i)) for i in range(self.count)]
        for i, value in enumerate(values):
            target.set_at(i, value)

    def _do_add_scalar(self, scalar: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.add(x, scalar))

    def _do_add(self, other: Vector, result: Vector) -> None:
        self._zip_into(other, result, self.ops.add)

    def _do_subtract_scalar(self, scalar: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.subtract(x, scalar))

    def _do_subtract(self, other: Vector, result: Vector) -> None:
        self._zip_into(other, result, self.ops.subtract)

    def _do_subtract_from(self, scalar: Any, result: Vector) -> None:
        self._do_negate(result)
        result._do_add_scalar(scalar, result)

    def _do_negate(self, result: Vector) -> None:
        self._map_into(result, self.ops.negate)

    def _do_conjugate(self, result: Vector) -> None:
        self._map_into(result, self.ops.conjugate)

    def _do_multiply(self, scalar: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.multiply(x, scalar))

    def _do_divide(self, scalar: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.divide(x, scalar))

    def _do_divide_by_this(self, scalar: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.divide(scalar, x))

    def _do_modulus(self, divisor: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.modulus(x, divisor))

    def _do_modulus_by_this(self, dividend: Any, result: Vector) -> None:
        self._map_into(result, lambda x: self.ops.modulus(dividend, x))

    def _do_pointwise_multiply(self, other: Vector, result: Vector) -> None:
        self._zip_into(other, result, self.ops.multiply)

    def _do_pointwise_divide(self, other: Vector, result: Vector) -> None:
        self._zip_into(other, result, self.ops.divide)

    def _do_pointwise_modulus(self, other: Vector, result: Vector) -> None:
        self._zip_into(other, result, self.ops.modulus)

    def _do_dot_product(self, other: Vector) -> Any:
        ops = self.ops
        total = ops.zero
        for i, value in self.storage.enumerate_nonzero_indexed():
            total = ops.add(total, ops.multiply(value, other.storage.at(i)))
        return total

    def _do_conjugate_dot_product(self, other: Vector) -> Any:
        ops = self.ops
        total = ops.zero
        for i, value in self.storage.enumerate_nonzero_indexed():
            total = ops.add(total, ops.multiply(ops.conjugate(value), other.storage.at(i)))
        return total

    # ------------------------------------------------------------------
    # Norms and reductions
    # ------------------------------------------------------------------

    def norm(self, p: float) -> float:
        """
        p-norm (sum |x|^p)^(1/p) for p >= 1; p = inf gives the maximum magnitude.

        Raises:
            ValidationError: If p < 1
        """
        p = check_norm_order(p)
        magnitudes = np.abs(self.to_array())
        if p == 1.0:
            return float(magnitudes.sum())
        if p == 2.0:
            return float(math.sqrt(float(np.sum(magnitudes * magnitudes))))
        if math.isinf(p):
            return float(magnitudes.max())
        return float(np.sum(magnitudes ** p) ** (1.0 / p))

    def l1_norm(self) -> float:
        return self.norm(1)

    def l2_norm(self) -> float:
        return self.norm(2)

    def infinity_norm(self) -> float:
        return self.norm(math.inf)

    def normalize(self, p: float) -> Vector:
        """
        This vector scaled to unit p-norm.

        Raises:
            ValidationError: If p < 1
            DivideByZeroError: If the vector is zero
        """
        norm = self.norm(p)
        if norm == 0.0:
            raise DivideByZeroError("normalize: cannot normalize the zero vector")
        return self.divide(norm)

    def absolute_minimum(self) -> float:
        return float(np.abs(self.to_array()).min())

    def absolute_minimum_index(self) -> int:
        return int(np.argmin(np.abs(self.to_array())))

    def absolute_maximum(self) -> float:
        return float(np.abs(self.to_array()).max())

    def absolute_maximum_index(self) -> int:
        return int(np.argmax(np.abs(self.to_array())))

    def maximum(self) -> Any:
        return self.storage.at(self.maximum_index())

    def maximum_index(self) -> int:
        """Index of the first largest element (real elements only)."""
        self.ops.require_ordered("maximum_index")
        return int(np.argmax(self.to_array()))

    def minimum(self) -> Any:
        return self.storage.at(self.minimum_index())

    def minimum_index(self) -> int:
        self.ops.require_ordered("minimum_index")
        return int(np.argmin(self.to_array()))

    def sum(self) -> Any:
        ops = self.ops
        total = ops.zero
        for _, value in self.storage.enumerate_nonzero_indexed():
            total = ops.add(total, value)
        return total

    def sum_magnitudes(self) -> float:
        return float(sum(self.ops.magnitude(v) for _, v in self.storage.enumerate_nonzero_indexed()))

    # ------------------------------------------------------------------
    # Copies and conversions
    # ------------------------------------------------------------------

    def clone(self) -> Vector:
        result = self.create_vector(self.count)
        self.storage.copy_to(result.storage, skip_clearing=True)
        return result

    def copy_to(self, target: Vector) -> None:
        """
        Copy every element into target.

        Raises:
            DimensionError: If target has a different size
        """
        self._check_operand(target, "target")
        self.storage.copy_to(target.storage)

    def set_values(self, values: ArrayLike) -> None:
        """
        Overwrite every element from a 1-D array-like.

        Raises:
            DimensionError: If values has the wrong length
        """
        check_not_none(values, "values")
        array = np.asarray(values)
        if array.ndim != 1 or array.shape[0] != self.count:
            raise DimensionError(
                f"values: expected {self.count} elements, got shape {array.shape}",
                name="values", expected=self.count, actual=array.shape,
            )
        if not self.ops.is_complex and np.iscomplexobj(array):
            raise ValidationError(f"values: complex data cannot be stored as {self.ops.name}")
        array = array.astype(self.ops.dtype, copy=False)
        storage = self.storage

        def assign(start: int, stop: int) -> None:
            for i in range(start, stop):
                storage.set_at(i, array[i])

        parallel_for(self.count, assign)

    def sub_vector(self, index: int, count: int) -> Vector:
        """New vector holding count elements starting at index."""
        check_range(index, count, self.count, "index")
        result = self.create_vector(count)
        self.storage.copy_sub_vector_to(result.storage, index, 0, count, skip_clearing=True)
        return result

    def set_sub_vector(self, index: int, count: int, sub_vector: Vector) -> None:
        """Overwrite count elements starting at index from sub_vector."""
        check_not_none(sub_vector, "sub_vector")
        check_range(index, count, self.count, "index")
        check_range(0, count, sub_vector.count, "count")
        check_same_element_type(self, sub_vector, "sub_vector")
        sub_vector.storage.copy_sub_vector_to(self.storage, 0, index, count)

    def copy_sub_vector_to(self, destination: Vector, source_index: int,
                           target_index: int, count: int) -> None:
        check_not_none(destination, "destination")
        check_same_element_type(self, destination, "destination")
        self.storage.copy_sub_vector_to(destination.storage, source_index, target_index, count)

    def to_array(self) -> NDArray[Any]:
        return self.storage.to_array()

    def to_column_matrix(self) -> Matrix:
        """(count, 1) matrix holding this vector."""
        matrix = self.create_matrix(self.count, 1)
        self.storage.copy_to_column(matrix.storage, 0, skip_clearing=True)
        return matrix

    def to_row_matrix(self) -> Matrix:
        """(1, count) matrix holding this vector."""
        matrix = self.create_matrix(1, self.count)
        self.storage.copy_to_row(matrix.storage, 0, skip_clearing=True)
        return matrix

    # ------------------------------------------------------------------
    # Traversal and mapping
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        return self.storage.enumerate()

    def enumerate_indexed(self) -> Iterator[tuple[int, Any]]:
        return self.storage.enumerate_indexed()

    def enumerate_nonzero_indexed(self) -> Iterator[tuple[int, Any]]:
        return self.storage.enumerate_nonzero_indexed()

    def map_inplace(self, f: Callable[[Any], Any], include_zeros: bool = True) -> None:
        self.storage.map_inplace(f, include_zeros)

    def map_indexed_inplace(self, f: Callable[[int, Any], Any], include_zeros: bool = True) -> None:
        self.storage.map_indexed_inplace(f, include_zeros)

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.storage == other.storage

    def __hash__(self) -> int:
        return hash(self.storage)

    def almost_equal(self, other: Vector, tolerance: ToleranceTier | None = None) -> bool:
        """Elementwise comparison within the element type's tolerance tier."""
        self._check_operand(other, "other")
        tier = tolerance or select_tolerance(self.ops)
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=tier.rtol, atol=tier.atol))

    def __str__(self) -> str:
        return format_vector(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.count}, {self.ops.name})"

"""
Input validation utilities for pylinalg.

These validators follow the "fail fast, fail loud" principle. Every public
operation runs them before it touches any storage, so a failed call never
leaves a caller-supplied result partially written.

Design principles:
    - No silent correction of sizes or indices
    - Each function validates ONE thing
    - Parameter names included in all error messages
    - Work on any container exposing count / row_count / column_count / ops,
      so they can run before a concrete type is known
"""

from __future__ import annotations

import operator
from typing import Any, Iterable

from pylinalg.core.exceptions import (
    DimensionError,
    DivideByZeroError,
    IndexOutOfRangeError,
    NotSquareError,
    NullArgumentError,
    StructurallyUnsupportedError,
    ValidationError,
)


def check_not_none(value: Any, name: str) -> None:
    """
    Verify a required operand was supplied.

    Raises:
        NullArgumentError: If value is None
    """
    if value is None:
        raise NullArgumentError(f"{name}: must not be None", name=name)


def check_dimension(value: int, name: str) -> int:
    """
    Verify a requested container dimension is a positive integer.

    Returns:
        The dimension as a Python int

    Raises:
        ValidationError: If value is not an integer or is less than 1
    """
    try:
        value = operator.index(value)
    except TypeError:
        raise ValidationError(
            f"{name}: expected an integer dimension, got {type(value).__name__}"
        ) from None
    if value < 1:
        raise ValidationError(f"{name}: must be positive, got {value}")
    return value


def check_count(vector: Any, expected: int, name: str) -> None:
    """
    Verify a vector has the required number of elements.

    Raises:
        DimensionError: If vector.count != expected
    """
    if vector.count != expected:
        raise DimensionError(
            f"{name}: expected {expected} elements, got {vector.count}",
            name=name, expected=expected, actual=vector.count,
        )


def check_shape(matrix: Any, rows: int, columns: int, name: str) -> None:
    """
    Verify a matrix has exactly the required shape.

    Raises:
        DimensionError: If the shape differs
    """
    actual = (matrix.row_count, matrix.column_count)
    if actual != (rows, columns):
        raise DimensionError(
            f"{name}: expected shape {(rows, columns)}, got {actual}",
            name=name, expected=(rows, columns), actual=actual,
        )


def check_same_shape(matrix: Any, other: Any, name: str) -> None:
    """
    Verify other has the same shape as matrix.

    Raises:
        DimensionError: If the shapes differ
    """
    check_shape(other, matrix.row_count, matrix.column_count, name)


def check_square(matrix: Any, name: str) -> None:
    """
    Verify a matrix is square.

    Raises:
        NotSquareError: If row_count != column_count
    """
    if matrix.row_count != matrix.column_count:
        shape = (matrix.row_count, matrix.column_count)
        raise NotSquareError(
            f"{name}: matrix must be square, got shape {shape}",
            name=name, actual=shape,
        )


def check_index(index: int, bound: int, name: str) -> int:
    """
    Verify 0 <= index < bound.

    Negative indices are rejected, not wrapped.

    Returns:
        The index as a Python int

    Raises:
        IndexOutOfRangeError: If the index is outside [0, bound)
        ValidationError: If index is not an integer
    """
    try:
        index = operator.index(index)
    except TypeError:
        raise ValidationError(
            f"{name}: expected an integer index, got {type(index).__name__}"
        ) from None
    if index < 0 or index >= bound:
        raise IndexOutOfRangeError(
            f"{name}: index {index} out of range [0, {bound})",
            name=name, index=index, bound=bound,
        )
    return index


def check_range(start: int, length: int, bound: int, name: str) -> None:
    """
    Verify the block [start, start + length) lies within [0, bound).

    Raises:
        ValidationError: If length is less than 1
        IndexOutOfRangeError: If the block leaves the container
    """
    if length < 1:
        raise ValidationError(f"{name}: length must be positive, got {length}")
    if start < 0 or start + length > bound:
        raise IndexOutOfRangeError(
            f"{name}: range [{start}, {start + length}) exceeds [0, {bound})",
            name=name, index=start + length - 1, bound=bound,
        )


def check_norm_order(p: float, name: str = "p") -> float:
    """
    Verify a p-norm order is at least 1 (infinity allowed).

    Raises:
        ValidationError: If p < 1 or is not a real number
    """
    try:
        p = float(p)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{name}: expected a real norm order, got {p!r}"
        ) from None
    if not p >= 1.0:
        raise ValidationError(f"{name}: norm order must be >= 1, got {p}")
    return p


def check_nonzero_divisor(ops: Any, divisor: Any, name: str) -> None:
    """
    Verify a scalar divisor is not the zero of the element type.

    Raises:
        DivideByZeroError: If divisor equals ops.zero
    """
    if ops.is_zero(divisor):
        raise DivideByZeroError(f"{name}: division by zero")


def check_same_element_type(container: Any, other: Any, name: str) -> None:
    """
    Verify two containers share an element type.

    Raises:
        ValidationError: If the element types differ
    """
    if container.ops is not other.ops:
        raise ValidationError(
            f"{name}: element type {other.ops.name} does not match "
            f"{container.ops.name}"
        )


def check_structure_fits(result: Any, operands: Iterable[Any], name: str) -> None:
    """
    Verify a structurally constrained result can hold the outcome.

    A result whose storage is not fully mutable (a diagonal storage) can
    only receive values computed from operands sharing its storage type.
    Vector operands do not constrain the pattern and are ignored.

    Raises:
        StructurallyUnsupportedError: If an operand's storage differs
    """
    storage = result.storage
    if storage.is_fully_mutable:
        return
    for operand in operands:
        operand_storage = getattr(operand, "storage", None)
        if operand_storage is None or not hasattr(operand, "row_count"):
            continue
        if type(operand_storage) is not type(storage):
            raise StructurallyUnsupportedError(
                f"{name}: {type(storage).__name__} result cannot hold values "
                f"derived from {type(operand_storage).__name__}",
                storage=type(storage).__name__,
            )

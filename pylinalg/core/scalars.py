"""
Scalar element strategies.

Containers are generic over their element type through a ScalarOps
strategy object rather than through type inspection at call sites. Each
supported NumPy dtype has exactly one strategy, so the identity elements
(zero and one) are fixed once per element type.

Supported element types:
    FLOAT64, FLOAT32: real IEEE floating point
    COMPLEX128, COMPLEX64: complex floating point (no modulus)
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any

import numpy as np

from pylinalg.core.exceptions import NotSupportedError, ValidationError


@dataclass(frozen=True)
class ScalarOps:
    """
    Arithmetic over one element type.

    Attributes:
        name: Short identifier ('float64', 'complex128', ...)
        dtype: NumPy dtype of the elements
        real_dtype: NumPy dtype of magnitudes and norms
        is_complex: True for complex element types
    """
    name: str
    dtype: np.dtype
    real_dtype: np.dtype
    is_complex: bool

    @property
    def zero(self) -> Any:
        """Additive identity."""
        return self.dtype.type(0)

    @property
    def one(self) -> Any:
        """Multiplicative identity."""
        return self.dtype.type(1)

    def coerce(self, value: Any, name: str = "scalar") -> Any:
        """
        Convert a Python or NumPy scalar to this element type.

        Raises:
            ValidationError: If value is not a number or would lose its
                imaginary part
        """
        if not is_scalar(value):
            raise ValidationError(
                f"{name}: expected a numeric scalar, got {type(value).__name__}"
            )
        if not self.is_complex and np.iscomplexobj(value):
            raise ValidationError(
                f"{name}: complex value {value!r} cannot be used with "
                f"{self.name} elements"
            )
        return self.dtype.type(value)

    def is_zero(self, value: Any) -> bool:
        return bool(value == 0)

    def is_one(self, value: Any) -> bool:
        return bool(value == 1)

    def add(self, a: Any, b: Any) -> Any:
        return self.dtype.type(a + b)

    def subtract(self, a: Any, b: Any) -> Any:
        return self.dtype.type(a - b)

    def multiply(self, a: Any, b: Any) -> Any:
        return self.dtype.type(a * b)

    def divide(self, a: Any, b: Any) -> Any:
        # IEEE semantics for elementwise zero divisors (inf / nan)
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.dtype.type(self.dtype.type(a) / self.dtype.type(b))

    def modulus(self, a: Any, b: Any) -> Any:
        """
        Canonical modulus: the result takes the sign of the divisor.

        Raises:
            NotSupportedError: For complex element types
        """
        self.require_ordered("modulus")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.dtype.type(np.mod(self.dtype.type(a), self.dtype.type(b)))

    def negate(self, a: Any) -> Any:
        return self.dtype.type(-a)

    def conjugate(self, a: Any) -> Any:
        if self.is_complex:
            return self.dtype.type(np.conj(a))
        return a

    def magnitude(self, a: Any) -> float:
        return float(abs(a))

    def require_ordered(self, operation: str) -> None:
        """
        Fail for operations that need a total order on the elements.

        Raises:
            NotSupportedError: For complex element types
        """
        if self.is_complex:
            raise NotSupportedError(
                f"{operation}: not defined for {self.name} elements"
            )


FLOAT64 = ScalarOps('float64', np.dtype(np.float64), np.dtype(np.float64), False)
FLOAT32 = ScalarOps('float32', np.dtype(np.float32), np.dtype(np.float32), False)
COMPLEX128 = ScalarOps('complex128', np.dtype(np.complex128), np.dtype(np.float64), True)
COMPLEX64 = ScalarOps('complex64', np.dtype(np.complex64), np.dtype(np.float32), True)

_BY_DTYPE = {
    ops.dtype: ops for ops in (FLOAT64, FLOAT32, COMPLEX128, COMPLEX64)
}


def scalar_ops_for(dtype: np.dtype | type | str) -> ScalarOps:
    """
    Look up the strategy for a dtype.

    Integer dtypes are promoted to float64; any other unsupported dtype
    is rejected.

    Raises:
        ValidationError: If dtype is not a supported element type
    """
    if isinstance(dtype, ScalarOps):
        return dtype
    resolved = np.dtype(dtype)
    if np.issubdtype(resolved, np.integer) or resolved == np.bool_:
        return FLOAT64
    try:
        return _BY_DTYPE[resolved]
    except KeyError:
        raise ValidationError(
            f"dtype: unsupported element type {resolved}, expected one of "
            f"{sorted(ops.name for ops in _BY_DTYPE.values())}"
        ) from None


def is_scalar(value: Any) -> bool:
    """True for Python and NumPy numbers (bool excluded)."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (numbers.Number, np.number))

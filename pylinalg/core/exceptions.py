"""
Exception hierarchy for pylinalg.

All exceptions inherit from PyLinalgError to allow catching any
library-specific error. Builtin exception types are mixed in where a
caller would naturally expect them (IndexError for a bad index,
ZeroDivisionError for division by the zero scalar).

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the offending parameter with actual vs expected values
    - Raised before any write, so a failed call leaves its result untouched
"""


class PyLinalgError(Exception):
    """Base exception for all pylinalg errors."""
    pass


class ValidationError(PyLinalgError, ValueError):
    """
    Input validation failed.

    Raised when arguments to a public operation fail validation checks.
    """
    pass


class NullArgumentError(ValidationError, TypeError):
    """
    A required operand was None.

    Attributes:
        name: Name of the missing parameter
    """

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.name = name


class DimensionError(ValidationError):
    """
    Operand dimensions are incompatible.

    Raised when a vector size or matrix shape does not match what the
    operation requires, including the shape of a caller-supplied result.

    Attributes:
        name: Name of the offending parameter
        expected: Expected size or shape, if known
        actual: Actual size or shape, if known
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        expected: int | tuple[int, ...] | None = None,
        actual: int | tuple[int, ...] | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.expected = expected
        self.actual = actual


class NotSquareError(DimensionError):
    """
    Operation requires a square matrix.

    Raised by trace, determinant, inverse and by square-only containers.
    """
    pass


class IndexOutOfRangeError(ValidationError, IndexError):
    """
    Index or index range falls outside the container.

    Attributes:
        name: Name of the offending parameter
        index: The rejected index
        bound: Exclusive upper bound the index had to respect
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        index: int | None = None,
        bound: int | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.index = index
        self.bound = bound


class NumericalError(PyLinalgError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class DivideByZeroError(NumericalError, ZeroDivisionError):
    """Division or modulus by the zero scalar of the element type."""
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular.

    Raised when an operation requires invertibility but the LU
    factorization has a zero pivot.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Index of the first zero pivot, if known
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index


class NotSupportedError(PyLinalgError):
    """
    Operation is not defined for these operands.

    Raised, for example, for the modulus of complex values.
    """
    pass


class StructurallyUnsupportedError(NotSupportedError):
    """
    Storage cannot represent the requested values.

    Raised when an operation would write a non-zero outside the pattern a
    storage can hold (off-diagonal of a diagonal storage) or asks a
    storage for a capability it lacks (permuting a diagonal storage).

    Attributes:
        storage: Class name of the storage that refused the operation
        capability: Missing capability, if the refusal is capability based
    """

    def __init__(
        self,
        message: str,
        storage: str | None = None,
        capability: str | None = None,
    ):
        super().__init__(message)
        self.storage = storage
        self.capability = capability


class ProviderError(PyLinalgError, RuntimeError):
    """
    Requested execution provider is unavailable.

    Attributes:
        provider: The provider name that could not be selected
    """

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider

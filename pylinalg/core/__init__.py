"""
Core infrastructure for pylinalg.

Shared abstractions used by the storage, vector and matrix layers.

Key components:
    exceptions: Exception hierarchy
    validation: Fail-fast input validators
    scalars: Element-type strategies (FLOAT64, FLOAT32, COMPLEX128, COMPLEX64)
    capabilities: Storage capability constants
    protocols: Distribution, LinearAlgebraProvider protocols
    config: Process-wide settings
    parallel: Chunked data-parallel loop
    tolerances: Tolerance tiers per element type
"""

from pylinalg.core.config import Settings, configure, get_settings, settings_context
from pylinalg.core.exceptions import (
    PyLinalgError,
    ValidationError,
    NullArgumentError,
    DimensionError,
    NotSquareError,
    IndexOutOfRangeError,
    NumericalError,
    DivideByZeroError,
    SingularMatrixError,
    NotSupportedError,
    StructurallyUnsupportedError,
    ProviderError,
)
from pylinalg.core.protocols import Distribution, LinearAlgebraProvider
from pylinalg.core.scalars import COMPLEX64, COMPLEX128, FLOAT32, FLOAT64, ScalarOps

__all__ = [
    # Config
    "Settings",
    "configure",
    "get_settings",
    "settings_context",
    # Exceptions
    "PyLinalgError",
    "ValidationError",
    "NullArgumentError",
    "DimensionError",
    "NotSquareError",
    "IndexOutOfRangeError",
    "NumericalError",
    "DivideByZeroError",
    "SingularMatrixError",
    "NotSupportedError",
    "StructurallyUnsupportedError",
    "ProviderError",
    # Protocols
    "Distribution",
    "LinearAlgebraProvider",
    # Scalars
    "ScalarOps",
    "FLOAT64",
    "FLOAT32",
    "COMPLEX128",
    "COMPLEX64",
]

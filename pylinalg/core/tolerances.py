"""
Tolerance tiers for approximate comparison.

Defines precision expectations per element type:
- FP64 (float64, complex128): close to machine precision
- FP32 (float32, complex64): relaxed for single-precision arithmetic

Used by almost_equal() on vectors and matrices, by the SVD rank cutoff,
and by the test suite.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pylinalg.core.scalars import ScalarOps


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='double precision',
)

FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32',
    description='single precision',
)


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    Complex dtypes report the epsilon of their real component.
    """
    return float(np.finfo(dtype).eps)


def select_tolerance(ops: ScalarOps) -> ToleranceTier:
    """Select the tolerance tier for an element type."""
    if ops.real_dtype == np.float32:
        return FP32
    return FP64

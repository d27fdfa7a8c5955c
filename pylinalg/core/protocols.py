"""
Core protocols for pylinalg.

These define structural interfaces for the external collaborators the
kernel consumes. We use Protocol (structural typing) rather than ABC
(nominal typing) so that any object with the right shape plugs in: a
hand-written sampler, a scipy.stats adapter, a GPU provider.

Design Principles:
    - Minimal contracts: prescribe only what the kernel calls
    - Array-in/array-out with explicit shapes for providers
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from numpy.typing import NDArray


@runtime_checkable
class Distribution(Protocol):
    """
    Source of random scalars for random matrix and vector construction.
    """

    def sample(self) -> Any:
        """Draw one scalar."""
        ...


@runtime_checkable
class LinearAlgebraProvider(Protocol):
    """
    Swappable execution strategy for dense kernels.

    Matrices cross this boundary as flat column-major buffers whose
    leading dimension is their row count, so a provider never needs to
    know about containers or storages.
    """

    @property
    def name(self) -> str:
        """
        Provider identifier.

        Convention: '{device}_{framework}', e.g. 'cpu_numpy', 'gpu_torch'.
        """
        ...

    def dot_product(self, x: NDArray[Any], y: NDArray[Any]) -> Any:
        """Unconjugated sum of x[i] * y[i]."""
        ...

    def matrix_multiply(
        self,
        transpose_a: bool,
        transpose_b: bool,
        alpha: Any,
        a: NDArray[Any],
        rows_a: int,
        columns_a: int,
        b: NDArray[Any],
        rows_b: int,
        columns_b: int,
        beta: Any,
        c: NDArray[Any],
    ) -> None:
        """
        Compute c = alpha * op(a) @ op(b) + beta * c in place.

        op(x) is x or its transpose according to the flags. rows_a and
        columns_a describe a as stored, before any transpose.
        """
        ...


"""
GPU provider built on PyTorch.

torch is imported lazily so that pylinalg never pays its import cost
unless this provider is actually selected. Buffers are copied to the
device for each call and the product copied back into the caller's
column-major output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from pylinalg.providers.numpy_provider import as_matrix

if TYPE_CHECKING:
    import torch


class TorchProvider:
    """
    Provider running dense kernels on a CUDA or MPS device.

    Args:
        device: torch device string, e.g. 'cuda' or 'mps'
    """

    def __init__(self, device: str = 'cuda'):
        import torch

        self._torch = torch
        self.device = torch.device(device)

    @property
    def name(self) -> str:
        return 'gpu_torch'

    def _to_device(self, array: NDArray[Any]) -> 'torch.Tensor':
        return self._torch.from_numpy(np.ascontiguousarray(array)).to(self.device)

    def dot_product(self, x: NDArray[Any], y: NDArray[Any]) -> Any:
        result = self._torch.dot(self._to_device(x), self._to_device(y))
        return result.cpu().item()

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
        left = self._to_device(as_matrix(a, rows_a, columns_a))
        right = self._to_device(as_matrix(b, rows_b, columns_b))
        if transpose_a:
            left = left.T
        if transpose_b:
            right = right.T
        product = (left @ right).cpu().numpy()
        out = as_matrix(c, product.shape[0], product.shape[1])
        if beta == 0:
            out[:, :] = alpha * product
        else:
            out[:, :] = alpha * product + beta * out

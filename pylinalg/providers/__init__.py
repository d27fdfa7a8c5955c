"""
Execution providers.

A provider runs the dense kernels (dot products and general matrix
products) behind DenseVector and DenseMatrix. The CPU NumPy provider is
always available; the PyTorch provider is used when torch is installed
and a CUDA or MPS device is present.

Usage:
    from pylinalg.providers import select_provider, set_provider

    set_provider(select_provider('auto'))
"""

from __future__ import annotations

import logging
import threading
import warnings
from typing import Literal

from pylinalg.core.config import get_settings
from pylinalg.core.exceptions import ProviderError
from pylinalg.core.protocols import LinearAlgebraProvider
from pylinalg.providers.numpy_provider import NumpyProvider

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_explicit: LinearAlgebraProvider | None = None
_selected: dict[str, LinearAlgebraProvider] = {}


def detect_gpu_device() -> str | None:
    """
    Name of the best available torch device, if any.

    Priority: CUDA > MPS (Apple Silicon). Returns None when torch is not
    installed or no GPU is present.
    """
    try:
        import torch
    except ImportError:
        return None
    if torch.cuda.is_available():
        return 'cuda'
    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return 'mps'
    return None


def select_provider(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> LinearAlgebraProvider:
    """
    Select an execution provider based on preference and availability.

    Args:
        prefer: Provider preference
            - 'cpu': Always use NumPy
            - 'gpu': Require a GPU (raises if unavailable)
            - 'auto': Use a GPU if available, else NumPy

    Returns:
        The selected provider

    Raises:
        ProviderError: If 'gpu' requested but no GPU available
    """
    if prefer == 'cpu':
        return NumpyProvider()

    device = detect_gpu_device()

    if prefer == 'gpu':
        if device is None:
            raise ProviderError(
                "GPU requested but no GPU available. "
                "Ensure PyTorch is installed with CUDA/MPS support.",
                provider='gpu_torch',
            )
        from pylinalg.providers.torch_provider import TorchProvider

        logger.debug("select_provider: using torch on %s", device)
        return TorchProvider(device)

    if device is None:
        logger.debug("select_provider: no GPU available, using cpu_numpy")
        return NumpyProvider()

    from pylinalg.providers.torch_provider import TorchProvider

    if device == 'mps':
        warnings.warn(
            "Selected MPS device: float64 products are not supported on MPS "
            "and will fail; pass prefer='cpu' for double precision.",
            RuntimeWarning,
            stacklevel=2,
        )
    logger.debug("select_provider: using torch on %s", device)
    return TorchProvider(device)


def set_provider(provider: LinearAlgebraProvider | None) -> None:
    """Install a provider for all dense kernels; None restores selection from settings."""
    global _explicit
    if provider is not None and not isinstance(provider, LinearAlgebraProvider):
        raise ProviderError(
            f"provider: {type(provider).__name__} does not implement LinearAlgebraProvider"
        )
    with _lock:
        _explicit = provider


def get_provider() -> LinearAlgebraProvider:
    """The installed provider, or the one selected by the 'provider' setting."""
    if _explicit is not None:
        return _explicit
    prefer = get_settings().provider
    with _lock:
        provider = _selected.get(prefer)
        if provider is None:
            provider = select_provider(prefer)
            _selected[prefer] = provider
        return provider


__all__ = [
    "NumpyProvider",
    "detect_gpu_device",
    "select_provider",
    "set_provider",
    "get_provider",
]

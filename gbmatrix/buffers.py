"""Transfer-ready host buffers backed by (optionally page-locked) torch storage.

Every buffer handed out here is a plain ``np.ndarray`` view over a CPU
``torch.Tensor``. The array keeps the tensor alive, so callers read and write
it like any other numpy array while a compute collaborator can wrap it again
with :func:`torch.from_numpy` and issue ``non_blocking`` copies to a device.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import torch

from .errors import TransferBufferError

_logger = logging.getLogger(__name__)

_TORCH_DTYPES = {
    np.dtype(np.float32): torch.float32,
    np.dtype(np.float64): torch.float64,
    np.dtype(np.int32): torch.int32,
    np.dtype(np.int64): torch.int64,
}


def has_cuda() -> bool:
    """Return ``True`` if a CUDA-capable device is available."""
    try:
        return bool(torch.cuda.is_available())
    except RuntimeError:  # pragma: no cover - broken driver installs
        return False


def resolve_pinning(pin_memory: bool | None) -> bool:
    """Turn a ``pin_memory`` setting into a concrete allocation decision."""
    if pin_memory is None:
        pinned = has_cuda()
        _logger.debug("pin_memory=auto resolved to %s", pinned)
        return pinned
    if pin_memory and not has_cuda():
        raise TransferBufferError("pin_memory=True requires a CUDA runtime")
    return bool(pin_memory)


def allocate(shape: int | Tuple[int, ...], dtype: np.dtype | type, *, pinned: bool) -> np.ndarray:
    """Allocate a zero-filled host array, page-locked when ``pinned``."""
    np_dtype = np.dtype(dtype)
    torch_dtype = _TORCH_DTYPES.get(np_dtype)
    if torch_dtype is None:
        raise TypeError(f"unsupported buffer dtype {np_dtype}")
    size = (shape,) if isinstance(shape, int) else tuple(shape)
    if any(dim < 0 for dim in size):
        raise ValueError(f"buffer shape must be non-negative, got {size}")
    try:
        tensor = torch.empty(size, dtype=torch_dtype, pin_memory=pinned).zero_()
    except RuntimeError as exc:
        raise TransferBufferError(
            f"could not allocate {'page-locked ' if pinned else ''}buffer of shape {size}"
        ) from exc
    return tensor.numpy()


def is_pinned(array: np.ndarray) -> bool:
    """Return ``True`` if ``array`` lives in page-locked host memory."""
    if not has_cuda():
        return False
    return bool(torch.from_numpy(array).is_pinned())


def as_tensor(array: np.ndarray) -> torch.Tensor:
    """Zero-copy CPU tensor view over a buffer."""
    return torch.from_numpy(np.ascontiguousarray(array))


__all__ = ["allocate", "as_tensor", "has_cuda", "is_pinned", "resolve_pinning"]

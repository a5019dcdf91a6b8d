"""Array coercion and in-memory loading for gbmatrix."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import torch

from .config import DataMatrixConfig
from .errors import DimensionError
from .matrix import DataMatrix


def ensure_numpy(array: np.ndarray | torch.Tensor | Sequence[float]) -> np.ndarray:
    """Convert ``array`` (numpy, torch, pandas or array-like) to ``np.ndarray``."""

    if isinstance(array, np.ndarray):
        return array
    if isinstance(array, torch.Tensor):
        return array.detach().cpu().numpy()
    if hasattr(array, "to_numpy"):
        return array.to_numpy()
    return np.asarray(array)


def from_arrays(
    X: np.ndarray | torch.Tensor | Sequence[Sequence[float]],
    y: np.ndarray | torch.Tensor | Sequence[float] | None = None,
    *,
    config: DataMatrixConfig | None = None,
) -> DataMatrix:
    """Build a :class:`DataMatrix` from a row-major feature matrix and labels.

    Parameters
    ----------
    X:
        Features of shape ``(rows, columns)``; copied column by column into
        the container's transfer-ready buffers as ``float32``.
    y:
        Optional labels of length ``rows``. Left at zero when omitted.
    config:
        Container settings.

    The returned container is not initialized; the trainer still calls
    :meth:`DataMatrix.init`.
    """

    X_np = ensure_numpy(X)
    if X_np.ndim != 2:
        raise DimensionError(f"X must be 2D (rows, columns), got shape {X_np.shape}")
    rows, columns = X_np.shape

    y_np = None
    if y is not None:
        y_np = ensure_numpy(y)
        if y_np.ndim != 1:
            raise DimensionError("y must be 1-D")
        if y_np.shape[0] != rows:
            raise DimensionError(f"X has {rows} rows but y has {y_np.shape[0]}")

    matrix = DataMatrix(rows, columns, config=config)
    X_f = X_np.astype(np.float32, copy=False)
    for c in range(columns):
        matrix.set_column(c, X_f[:, c])
    if y_np is not None:
        matrix.set_labels(y_np.astype(np.float32, copy=False))
    return matrix


__all__ = ["ensure_numpy", "from_arrays"]

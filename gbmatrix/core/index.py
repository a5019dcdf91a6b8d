"""Column index construction: stable per-column sort permutations."""

from __future__ import annotations

from typing import Literal, Tuple

import numpy as np

from ..errors import DimensionError


def sorted_index(
    values: np.ndarray,
    missing: Literal["last", "first"] = "last",
) -> Tuple[np.ndarray, np.ndarray]:
    """Return the ascending row permutation of ``values`` and the reordered values.

    Ties keep their original row order. ``-inf`` and ``+inf`` order like any
    other number; NaN marks a missing value and is placed after ``+inf``
    (``missing="last"``) or before ``-inf`` (``missing="first"``), NaN rows
    staying in row order among themselves.

    Floating input keeps its dtype; anything else is sorted as ``float32``.
    """
    if missing not in ("last", "first"):
        raise ValueError(f"missing must be 'last' or 'first', got {missing!r}")
    values_f = np.asarray(values)
    if not np.issubdtype(values_f.dtype, np.floating):
        values_f = values_f.astype(np.float32)
    if values_f.ndim != 1:
        raise ValueError("values must be a 1D array")

    n = values_f.shape[0]
    if n <= 1:
        order = np.arange(n, dtype=np.int32)
        return order, values_f.copy()

    # numpy already sorts NaN to the end and keeps equal keys stable.
    order = np.argsort(values_f, kind="stable")
    if missing == "first":
        nan_rows = np.flatnonzero(np.isnan(values_f))
        if nan_rows.size:
            order = np.concatenate([nan_rows, order[: n - nan_rows.size]])
    order = order.astype(np.int32, copy=False)
    return order, values_f[order]


def validate_permutation(permutation: np.ndarray, rows: int) -> None:
    """Raise :class:`DimensionError` unless ``permutation`` covers ``[0, rows)`` once."""
    perm = np.asarray(permutation)
    if perm.ndim != 1 or perm.shape[0] != rows:
        raise DimensionError(f"index has shape {perm.shape}, expected ({rows},)")
    if rows == 0:
        return
    if not np.issubdtype(perm.dtype, np.integer):
        raise DimensionError(f"index must hold integers, got {perm.dtype}")
    lo = int(perm.min())
    hi = int(perm.max())
    if lo < 0 or hi >= rows:
        raise DimensionError(f"index values span [{lo}, {hi}], outside [0, {rows})")
    counts = np.bincount(perm.astype(np.int64, copy=False), minlength=rows)
    if (counts != 1).any():
        missing_rows = int((counts == 0).sum())
        raise DimensionError(f"index is not a permutation: {missing_rows} rows missing")


__all__ = ["sorted_index", "validate_permutation"]

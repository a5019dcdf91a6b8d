"""Configuration objects for gbmatrix."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Literal


@dataclass(frozen=True, slots=True)
class DataMatrixConfig:
    """Settings steering buffer allocation and column index construction.

    Parameters
    ----------
    pin_memory:
        Allocate ``index``/``data``/``sorted_data``/``grad`` in page-locked
        host memory. ``None`` pins only when a CUDA runtime is available;
        ``True`` without CUDA is an allocation failure.
    n_jobs:
        Number of worker threads sorting columns in parallel (joblib
        semantics, ``-1`` uses every core). ``1`` sorts sequentially.
    missing:
        Where NaN feature values land in each column index:
        ``"last"`` after ``+inf`` or ``"first"`` before ``-inf``.
    validate:
        Re-check every freshly built column index is a permutation of
        ``[0, rows)``. Useful while debugging a loader.
    """

    pin_memory: bool | None = None
    n_jobs: int = 1
    missing: Literal["last", "first"] = "last"
    validate: bool = False

    def __post_init__(self) -> None:
        if self.missing not in ("last", "first"):
            raise ValueError(f"missing must be 'last' or 'first', got {self.missing!r}")
        if self.n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")

    @classmethod
    def from_env(cls, base: "DataMatrixConfig | None" = None) -> "DataMatrixConfig":
        """Return ``base`` with ``GBMATRIX_*`` environment overrides applied."""
        cfg = base if base is not None else cls()
        overrides: dict[str, object] = {}

        pin_env = os.getenv("GBMATRIX_PIN_MEMORY")
        if pin_env is not None:
            if pin_env not in ("0", "1"):
                raise ValueError(f"GBMATRIX_PIN_MEMORY must be '0' or '1', got {pin_env!r}")
            overrides["pin_memory"] = pin_env == "1"

        jobs_env = os.getenv("GBMATRIX_N_JOBS")
        if jobs_env is not None:
            try:
                overrides["n_jobs"] = int(jobs_env)
            except ValueError as exc:
                raise ValueError(f"GBMATRIX_N_JOBS must be an integer, got {jobs_env!r}") from exc

        if os.getenv("GBMATRIX_VALIDATE") == "1":
            overrides["validate"] = True

        if not overrides:
            return cfg
        return replace(cfg, **overrides)

"""The DataMatrix dataset container."""

from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Tuple, Union

import numpy as np
import torch
from joblib import Parallel, delayed

from . import buffers
from .config import DataMatrixConfig
from .core.gradient import GradFunc, GradientFunction, as_gradient_function, compute_gradients
from .core.index import sorted_index, validate_permutation
from .errors import DimensionError, PreconditionError


class DataMatrix:
    """Feature columns, labels, predictions and gradients for one training run.

    ``index``, ``data`` and ``sorted_data`` hold one row-length array per
    feature column; they are views into feature-major ``(columns, rows)``
    transfer-ready blocks, so an external loader fills them in place
    (``dm.data[c][:] = values`` or :meth:`set_column`). ``y`` and ``y_hat``
    are ordinary host arrays; the trainer may write ``y_hat`` directly between
    rounds. ``grad`` is only ever written by :meth:`update_grad`.
    """

    def __init__(self, rows: int, columns: int, config: DataMatrixConfig | None = None) -> None:
        rows = int(rows)
        columns = int(columns)
        if rows < 0 or columns < 0:
            raise ValueError(f"rows and columns must be non-negative, got ({rows}, {columns})")
        # environment overrides only apply to the default config
        self.config = DataMatrixConfig.from_env() if config is None else config
        self._logger = logging.getLogger(__name__)
        self._rows = rows
        self._columns = columns

        # Any allocation failure propagates before the instance is usable.
        pinned = buffers.resolve_pinning(self.config.pin_memory)
        self._index_block = buffers.allocate((columns, rows), np.int32, pinned=pinned)
        self._data_block = buffers.allocate((columns, rows), np.float32, pinned=pinned)
        self._sorted_block = buffers.allocate((columns, rows), np.float32, pinned=pinned)
        self._grad = buffers.allocate(rows, np.float32, pinned=pinned)
        self._pinned = pinned

        self._index = tuple(self._index_block[c] for c in range(columns))
        self._data = tuple(self._data_block[c] for c in range(columns))
        self._sorted_data = tuple(self._sorted_block[c] for c in range(columns))

        self.y = np.zeros(rows, dtype=np.float32)
        self.y_hat = np.zeros(rows, dtype=np.float32)

        self._grad_func: GradientFunction | None = None
        self._init = False

    def __repr__(self) -> str:
        return (
            f"DataMatrix(rows={self._rows}, columns={self._columns}, "
            f"pinned={self._pinned}, initialized={self._init})"
        )

    # Dimensions / state -------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def initialized(self) -> bool:
        return self._init

    @property
    def pinned(self) -> bool:
        """Whether the staged buffers live in page-locked host memory."""
        return self._pinned

    @property
    def grad_func(self) -> GradientFunction | None:
        return self._grad_func

    # Buffers ------------------------------------------------------------

    @property
    def index(self) -> Tuple[np.ndarray, ...]:
        return self._index

    @property
    def data(self) -> Tuple[np.ndarray, ...]:
        return self._data

    @property
    def sorted_data(self) -> Tuple[np.ndarray, ...]:
        return self._sorted_data

    @property
    def grad(self) -> np.ndarray:
        """Read-only view of the gradient buffer; only :meth:`update_grad` writes it."""
        view = self._grad.view()
        view.flags.writeable = False
        return view

    def tensors(self) -> dict[str, torch.Tensor]:
        """Zero-copy CPU tensor views over the transfer-ready buffers.

        Column blocks are feature-major ``(columns, rows)``. Moving them to a
        device (``t.to(device, non_blocking=True)``) is up to the caller.
        """
        return {
            "index": buffers.as_tensor(self._index_block),
            "data": buffers.as_tensor(self._data_block),
            "sorted_data": buffers.as_tensor(self._sorted_block),
            "grad": buffers.as_tensor(self._grad),
        }

    # Loading ------------------------------------------------------------

    def _check_column(self, column: int) -> int:
        column = int(column)
        if not 0 <= column < self._columns:
            raise IndexError(f"column {column} out of range for {self._columns} columns")
        return column

    def set_column(self, column: int, values: np.ndarray) -> None:
        """Copy raw feature ``values`` into column ``column``."""
        column = self._check_column(column)
        values_np = np.asarray(values)
        if values_np.shape != (self._rows,):
            raise DimensionError(
                f"column {column} has shape {values_np.shape}, expected ({self._rows},)"
            )
        self._data[column][:] = values_np

    def set_labels(self, values: np.ndarray) -> None:
        """Copy ``values`` into the label buffer."""
        values_np = np.asarray(values)
        if values_np.shape != (self._rows,):
            raise DimensionError(f"labels have shape {values_np.shape}, expected ({self._rows},)")
        self.y[:] = values_np

    # Column indices -----------------------------------------------------

    def build_index(self, column: int) -> np.ndarray:
        """(Re)generate the sorted index and sorted values of one column."""
        column = self._check_column(column)
        order, values = sorted_index(self._data[column], missing=self.config.missing)
        self._store_index(column, order, values)
        return self._index[column]

    def build_indices(self) -> None:
        """(Re)generate the sorted index and sorted values of every column."""
        if self._columns == 0 or self._rows == 0:
            return
        t0 = perf_counter()
        missing = self.config.missing
        n_jobs = self.config.n_jobs
        if n_jobs == 1:
            results = [sorted_index(self._data[c], missing=missing) for c in range(self._columns)]
        else:
            # argsort releases the GIL, threads avoid copying the columns
            results = Parallel(n_jobs=n_jobs, prefer="threads")(
                delayed(sorted_index)(self._data[c], missing=missing) for c in range(self._columns)
            )
        for column, (order, values) in enumerate(results):
            self._store_index(column, order, values)

        if self._logger.isEnabledFor(logging.INFO):
            self._logger.info(json.dumps({
                "event": "build_indices",
                "rows": self._rows,
                "columns": self._columns,
                "n_jobs": n_jobs,
                "missing": missing,
                "pinned": self._pinned,
                "build_ms": (perf_counter() - t0) * 1000.0,
            }))

    def _store_index(self, column: int, order: np.ndarray, values: np.ndarray) -> None:
        if self.config.validate:
            validate_permutation(order, self._rows)
        self._index[column][:] = order
        self._sorted_data[column][:] = values

    # Training entry points ----------------------------------------------

    def init(self, initial_y: float, grad_func: Union[GradientFunction, GradFunc]) -> None:
        """Reset predictions to ``initial_y``, store ``grad_func`` and build the column indices.

        May be called again to reset; the container stays ready.
        """
        func = as_gradient_function(grad_func)
        if np.ndim(self.y_hat) != 1 or len(self.y_hat) != self._rows:
            raise DimensionError(
                f"y_hat has shape {np.shape(self.y_hat)}, expected ({self._rows},)"
            )
        self.build_indices()
        if isinstance(self.y_hat, np.ndarray) and self.y_hat.flags.writeable:
            self.y_hat[:] = initial_y
        else:
            self.y_hat = np.full(self._rows, initial_y, dtype=np.float32)
        self._grad_func = func
        self._init = True
        self._logger.debug("initialized %r with initial_y=%s", self, initial_y)

    def update_grad(self) -> None:
        """Recompute ``grad[i] = grad_func(y[i], y_hat[i])`` for every row."""
        if not self._init or self._grad_func is None:
            raise PreconditionError("not initialized: call init() before update_grad()")
        compute_gradients(self.y, self.y_hat, self._grad_func, self._grad)


__all__ = ["DataMatrix"]

"""Gradient recomputation from labels, predictions and a loss-gradient function."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

import numpy as np

from ..errors import DimensionError

# (label, prediction) -> d loss / d prediction
GradFunc = Callable[[float, float], float]


@dataclass(frozen=True, slots=True)
class GradientFunction:
    """Loss-gradient strategy applied row by row or over whole arrays.

    Parameters
    ----------
    func:
        Pure function of ``(label, prediction)`` returning the gradient.
    vectorized:
        When ``True`` ``func`` is called once with two ``float64`` arrays and
        must return an array of the same length. Otherwise it is called once
        per row with Python floats.
    """

    func: Callable
    vectorized: bool = False

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise TypeError(f"gradient function must be callable, got {type(self.func).__name__}")

    def __call__(self, label: float, prediction: float) -> float:
        return float(self.func(float(label), float(prediction)))

    def apply(self, labels: np.ndarray, predictions: np.ndarray, out: np.ndarray) -> np.ndarray:
        """Write ``func(labels[i], predictions[i])`` into ``out`` and return it."""
        n = out.shape[0]
        if n == 0:
            return out
        labels_d = np.asarray(labels, dtype=np.float64)
        preds_d = np.asarray(predictions, dtype=np.float64)
        if self.vectorized:
            result = np.asarray(self.func(labels_d, preds_d), dtype=np.float64)
            if result.shape != (n,):
                raise DimensionError(
                    f"vectorized gradient returned shape {result.shape}, expected ({n},)"
                )
        else:
            result = np.frompyfunc(self.__call__, 2, 1)(labels_d, preds_d).astype(np.float64)
        out[:] = result
        return out


def as_gradient_function(func: Union[GradientFunction, GradFunc]) -> GradientFunction:
    """Wrap a plain callable as an elementwise :class:`GradientFunction`."""
    if isinstance(func, GradientFunction):
        return func
    return GradientFunction(func)


def compute_gradients(
    labels: np.ndarray,
    predictions: np.ndarray,
    grad_func: Union[GradientFunction, GradFunc],
    out: np.ndarray,
) -> np.ndarray:
    """Recompute ``out`` from scratch as the elementwise loss gradient."""
    n = out.shape[0]
    if out.ndim != 1:
        raise DimensionError(f"gradient buffer must be 1D, got shape {out.shape}")
    for name, arr in (("labels", labels), ("predictions", predictions)):
        if np.ndim(arr) != 1 or len(arr) != n:
            raise DimensionError(f"{name} has shape {np.shape(arr)}, expected ({n},)")
    return as_gradient_function(grad_func).apply(labels, predictions, out)


__all__ = ["GradFunc", "GradientFunction", "as_gradient_function", "compute_gradients"]

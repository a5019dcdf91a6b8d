"""Drive a DataMatrix through a few boosting rounds with exact-split stumps.

The stump search stands in for a real tree builder: it scans every column in
``index`` order and picks the split with the best squared-gradient gain.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gbmatrix import DataMatrixConfig, GradientFunction, from_arrays

N_SAMPLES = 5000
N_FEATURES = 8
N_ROUNDS = 20
LEARNING_RATE = 0.3
SEED = 123


def squared_error_gradient(label: np.ndarray, pred: np.ndarray) -> np.ndarray:
    return pred - label


def best_stump(dm) -> tuple[int, float, float, float]:
    """Return ``(feature, threshold, left_value, right_value)`` for the best stump."""
    total = float(dm.grad.sum())
    n = dm.rows
    best = (-1, 0.0, 0.0, 0.0)
    best_gain = 0.0
    for c in range(dm.columns):
        order = dm.index[c]
        values = dm.sorted_data[c]
        left_sum = np.cumsum(dm.grad[order], dtype=np.float64)[:-1]
        left_n = np.arange(1, n, dtype=np.float64)
        right_sum = total - left_sum
        gain = left_sum**2 / left_n + right_sum**2 / (n - left_n) - total**2 / n
        # only cut between distinct values
        gain[values[1:] == values[:-1]] = -np.inf
        k = int(np.argmax(gain))
        if gain[k] > best_gain:
            best_gain = float(gain[k])
            threshold = 0.5 * float(values[k] + values[k + 1])
            best = (c, threshold, -left_sum[k] / left_n[k], -right_sum[k] / (n - left_n[k]))
    return best


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    rng = np.random.default_rng(SEED)
    X = rng.normal(size=(N_SAMPLES, N_FEATURES)).astype(np.float32)
    y = (np.sin(X[:, 0]) + 0.5 * X[:, 1] + 0.1 * rng.standard_normal(N_SAMPLES)).astype(np.float32)

    dm = from_arrays(X, y, config=DataMatrixConfig(n_jobs=-1))
    dm.init(float(y.mean()), GradientFunction(squared_error_gradient, vectorized=True))

    for round_idx in range(N_ROUNDS):
        dm.update_grad()
        feature, threshold, left, right = best_stump(dm)
        if feature < 0:
            break
        step = np.where(dm.data[feature] <= threshold, left, right)
        dm.y_hat += LEARNING_RATE * step.astype(np.float32)
        mse = float(np.mean((dm.y_hat - dm.y) ** 2))
        print(f"round {round_idx:2d}  feature {feature}  threshold {threshold:+.3f}  mse {mse:.4f}")


if __name__ == "__main__":
    main()

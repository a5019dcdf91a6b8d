"""Core algorithms behind the gbmatrix dataset container."""

from .gradient import GradFunc, GradientFunction, as_gradient_function, compute_gradients
from .index import sorted_index, validate_permutation

__all__ = [
    "GradFunc",
    "GradientFunction",
    "as_gradient_function",
    "compute_gradients",
    "sorted_index",
    "validate_permutation",
]

"""gbmatrix: staged dataset container for GPU gradient boosting."""

from .config import DataMatrixConfig
from .core import GradientFunction, sorted_index
from .data import from_arrays
from .errors import DimensionError, GBMatrixError, PreconditionError, TransferBufferError
from .matrix import DataMatrix

__version__ = "0.1.0"

__all__ = [
    "DataMatrix",
    "DataMatrixConfig",
    "DimensionError",
    "GBMatrixError",
    "GradientFunction",
    "PreconditionError",
    "TransferBufferError",
    "from_arrays",
    "sorted_index",
]

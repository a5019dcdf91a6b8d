"""Exceptions raised by gbmatrix."""

from __future__ import annotations


class GBMatrixError(Exception):
    """Base class for gbmatrix errors."""


class PreconditionError(GBMatrixError, RuntimeError):
    """An operation was called in a state that does not allow it."""


class DimensionError(GBMatrixError, ValueError):
    """A buffer length disagrees with the container's ``rows``/``columns``."""


class TransferBufferError(GBMatrixError, MemoryError):
    """Transfer-ready (page-locked) host memory could not be allocated."""


__all__ = ["GBMatrixError", "PreconditionError", "DimensionError", "TransferBufferError"]

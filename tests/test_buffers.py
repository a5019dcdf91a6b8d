import numpy as np
import pytest
import torch

from gbmatrix import buffers
from gbmatrix.errors import TransferBufferError


def test_allocate_returns_zeroed_numpy_view():
    arr = buffers.allocate((2, 3), np.float32, pinned=False)
    assert isinstance(arr, np.ndarray)
    assert arr.shape == (2, 3)
    assert arr.dtype == np.float32
    assert not arr.any()
    view = buffers.as_tensor(arr)
    arr[1, 2] = 4.0
    assert view[1, 2].item() == 4.0


def test_allocate_empty_buffer():
    arr = buffers.allocate(0, np.int32, pinned=False)
    assert arr.shape == (0,)


def test_allocate_rejects_unsupported_dtype():
    with pytest.raises(TypeError):
        buffers.allocate(4, np.complex64, pinned=False)


def test_allocate_rejects_negative_shape():
    with pytest.raises(ValueError):
        buffers.allocate((2, -1), np.float32, pinned=False)


def test_resolve_pinning_auto_follows_cuda():
    assert buffers.resolve_pinning(None) == torch.cuda.is_available()
    assert buffers.resolve_pinning(False) is False


@pytest.mark.skipif(torch.cuda.is_available(), reason="exercises the no-CUDA failure path")
def test_forced_pinning_without_cuda_fails():
    with pytest.raises(TransferBufferError):
        buffers.resolve_pinning(True)
    assert not buffers.is_pinned(buffers.allocate(3, np.float32, pinned=False))


@pytest.mark.skipif(not torch.cuda.is_available(), reason="CUDA device not available")
def test_pinned_allocation():
    arr = buffers.allocate(8, np.float32, pinned=True)
    assert buffers.is_pinned(arr)

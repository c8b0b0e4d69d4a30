# tests/test_validation.py
"""
Validation and device helpers.

Covers:
- validate_data converts list / numpy / tensor input to int64 (n, d)
- float input accepted only when integral and finite
- configuration checks for damping, max_iter and chunk_size
- memory estimate used to pre-flight a run, out-of-memory detection
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from apcluster.utils.validation import (
    validate_data, check_damping, check_max_iter, check_chunk_size
)
from apcluster.utils.device import (
    parse_device, estimate_memory_usage, matrix_nbytes, get_free_memory, is_out_of_memory
)


def test_validate_list_numpy_and_tensor(torch_device):
    X_list = validate_data([[1, 2], [3, 4]], device=torch_device)
    X_np = validate_data(np.array([[1, 2], [3, 4]], dtype=np.int32))
    X_t = validate_data(torch.tensor([[1.0, 2.0], [3.0, 4.0]]))
    for X in (X_list, X_np, X_t):
        assert X.dtype == torch.int64
        assert X.shape == (2, 2)
        assert X.tolist() == [[1, 2], [3, 4]]


def test_validate_1d_becomes_column():
    assert validate_data([4, 5, 6]).shape == (3, 1)


def test_validate_copy_is_independent():
    X = torch.tensor([[1, 2]])
    Y = validate_data(X, copy=True)
    Y[0, 0] = 9
    assert X[0, 0].item() == 1


@pytest.mark.parametrize("bad", [
    [[1.5, 2.0]],
    [[float("nan"), 1.0]],
    [[float("inf"), 1.0]],
])
def test_validate_rejects_non_integral(bad):
    with pytest.raises(ValueError):
        validate_data(bad)


def test_validate_rejects_bad_shapes_and_types():
    with pytest.raises(ValueError):
        validate_data([])
    with pytest.raises(ValueError):
        validate_data(torch.zeros(2, 2, 2, dtype=torch.int64))
    with pytest.raises(TypeError):
        validate_data("1,2,3")


def test_check_damping():
    assert check_damping(0.5) == 0.5
    assert check_damping(1) == 1.0
    for bad in (0, -0.5, 1.01):
        with pytest.raises(ValueError):
            check_damping(bad)
    with pytest.raises(TypeError):
        check_damping("0.5")


def test_check_max_iter():
    assert check_max_iter(None) is None
    assert check_max_iter(200) == 200
    with pytest.raises(ValueError):
        check_max_iter(0)
    with pytest.raises(TypeError):
        check_max_iter(2.5)


def test_parse_device():
    assert parse_device(None).type == "cpu"
    assert parse_device("cpu").type == "cpu"
    with pytest.raises(ValueError):
        parse_device("tpu")
    with pytest.raises(TypeError):
        parse_device(3)


def test_memory_estimate():
    assert matrix_nbytes(3, 4) == 3 * 4 * 8
    est = estimate_memory_usage(n_samples=10, n_features=2)
    assert est["matrices"] == 6 * 10 * 10 * 8
    assert est["total"] == sum(v for k, v in est.items() if k != "total")


def test_memory_estimate_shrinks_with_chunking():
    full = estimate_memory_usage(n_samples=100, n_features=3)
    chunked = estimate_memory_usage(n_samples=100, n_features=3, chunk_size=10)
    assert full["similarity_workspace"] == 100 * 100 * 3 * 8
    assert chunked["similarity_workspace"] == 10 * 100 * 3 * 8
    assert chunked["matrices"] == full["matrices"]
    assert chunked["total"] < full["total"]


def test_free_memory_unknown_on_cpu():
    assert get_free_memory("cpu") is None


@pytest.mark.parametrize("value", [1, 7, np.int64(3), None])
def test_check_chunk_size_accepts(value):
    result = check_chunk_size(value)
    assert result == (None if value is None else int(value))


@pytest.mark.parametrize("value, error", [
    (0, ValueError),
    (-2, ValueError),
    (2.5, TypeError),
    ("a", TypeError),
    (True, TypeError),
])
def test_check_chunk_size_rejects(value, error):
    with pytest.raises(error):
        check_chunk_size(value)


def test_is_out_of_memory():
    assert is_out_of_memory(MemoryError())
    assert is_out_of_memory(torch.cuda.OutOfMemoryError("CUDA out of memory"))
    assert is_out_of_memory(RuntimeError("DefaultCPUAllocator: can't allocate memory"))
    assert not is_out_of_memory(RuntimeError("Matrix has been destroyed"))
    assert not is_out_of_memory(ValueError("out of memory"))

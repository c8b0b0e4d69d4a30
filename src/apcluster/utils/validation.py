"""
Input validation utilities.

Provides functions for validating the data matrix and the estimator
configuration before a run allocates any matrix.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np


def validate_data(X: Union[Tensor, np.ndarray, list],
                 device: Optional[torch.device] = None,
                 ensure_2d: bool = True,
                 ensure_min_samples: int = 1,
                 ensure_min_features: int = 1,
                 copy: bool = False) -> Tensor:
    """Validate and convert input data to an int64 tensor.

    Floating point input is accepted only if every value is finite and
    integral.

    Args:
        X: Input data (tensor, numpy array, or list)
        device: Target device
        ensure_2d: Whether to ensure 2D shape
        ensure_min_samples: Minimum number of samples required
        ensure_min_features: Minimum number of features required
        copy: Whether to force a copy

    Returns:
        Validated (n, d) int64 tensor

    Raises:
        TypeError: If X cannot be converted
        ValueError: If validation fails
    """
    if isinstance(X, Tensor):
        X = X.detach()
    elif isinstance(X, np.ndarray):
        if X.dtype == object:
            raise TypeError("Cannot convert object array to tensor")
        X = torch.from_numpy(np.ascontiguousarray(X))
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.is_complex():
        raise TypeError("Complex input is not supported")

    if X.is_floating_point():
        if not torch.isfinite(X).all():
            raise ValueError("Input contains NaN or infinite values")
        if not torch.equal(X, torch.trunc(X)):
            raise ValueError("Input must contain integer values")

    if device is not None and X.device != device:
        X = X.to(device)
    if X.dtype != torch.int64:
        X = X.to(torch.int64)
    elif copy:
        X = X.clone()

    if ensure_2d:
        if X.dim() == 1:
            X = X.unsqueeze(1)
        elif X.dim() != 2:
            raise ValueError(f"Expected 2D array, got {X.dim()}D")

        n_samples, n_features = X.shape

        if n_samples < ensure_min_samples:
            raise ValueError(f"Found {n_samples} samples, but need at least "
                           f"{ensure_min_samples}")

        if n_features < ensure_min_features:
            raise ValueError(f"Found {n_features} features, but need at least "
                           f"{ensure_min_features}")

    return X


def check_damping(damping: float) -> float:
    """Validate the damping factor (weight of the freshly computed value).

    Raises:
        ValueError: If damping is outside (0, 1]
    """
    if isinstance(damping, bool) or not isinstance(damping, (int, float)):
        raise TypeError(f"damping must be a number, got {type(damping)}")

    damping = float(damping)
    if not 0.0 < damping <= 1.0:
        raise ValueError(f"damping must be in (0, 1], got {damping}")
    return damping


def check_max_iter(max_iter: Optional[int]) -> Optional[int]:
    """Validate the iteration cap. None means unbounded."""
    if max_iter is None:
        return None

    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)):
        raise TypeError(f"max_iter must be int or None, got {type(max_iter)}")

    if max_iter <= 0:
        raise ValueError(f"max_iter must be positive, got {max_iter}")
    return int(max_iter)


def check_chunk_size(chunk_size: Optional[int]) -> Optional[int]:
    """Validate the similarity block size. None processes all rows at once."""
    if chunk_size is None:
        return None

    if isinstance(chunk_size, bool) or not isinstance(chunk_size, (int, np.integer)):
        raise TypeError(f"chunk_size must be int or None, got {type(chunk_size)}")

    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return int(chunk_size)


def check_square(matrix: Tensor, name: str = 'matrix') -> None:
    """Raise ValueError unless matrix is a 2D square tensor."""
    if matrix.dim() != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"{name} must be square, got shape {tuple(matrix.shape)}")

"""
Device management utilities for GPU/CPU computation.

Provides device selection and the memory estimates used to pre-flight
matrix allocation for a message-passing run.
"""

from typing import Optional, Union, Dict
import torch
import warnings


# Number of N x N matrices alive at the peak of a round:
# similarity, responsibility, availability, criterion + two snapshots
N_SQUARE_MATRICES = 6


def get_default_device() -> torch.device:
    """Get the default device based on availability.

    Returns:
        Default device (cuda if available, else cpu)
    """
    if torch.cuda.is_available():
        return torch.device('cuda')
    elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return torch.device('mps')
    else:
        return torch.device('cpu')


def parse_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Parse device specification.

    Args:
        device: Device specification
            - None: Use CPU
            - 'auto': Use best available
            - 'cpu': Use CPU
            - 'cuda': Use default CUDA device
            - 'cuda:X': Use CUDA device X
            - 'mps': Use Apple Metal Performance Shaders
            - torch.device: Use as-is

    Returns:
        Parsed device
    """
    if device is None:
        return torch.device('cpu')

    if device == 'auto':
        return get_default_device()

    if isinstance(device, torch.device):
        return device

    if isinstance(device, str):
        if device == 'cpu':
            return torch.device('cpu')
        elif device.startswith('cuda'):
            if not torch.cuda.is_available():
                warnings.warn("CUDA not available, falling back to CPU")
                return torch.device('cpu')
            return torch.device(device)
        elif device == 'mps':
            if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                return torch.device('mps')
            else:
                warnings.warn("MPS not available, falling back to CPU")
                return torch.device('cpu')
        else:
            raise ValueError(f"Unknown device: {device}")
    else:
        raise TypeError(f"Device must be str or torch.device, got {type(device)}")


def get_free_memory(device: Optional[Union[str, torch.device]] = None) -> Optional[int]:
    """Free bytes on a CUDA device, or None where it cannot be queried."""
    device = parse_device(device)
    if device.type != 'cuda':
        return None
    free, _total = torch.cuda.mem_get_info(device)
    return free


def matrix_nbytes(n_rows: int, n_cols: int, dtype: torch.dtype = torch.int64) -> int:
    """Bytes needed for one dense matrix of the given shape."""
    element_size = torch.empty((), dtype=dtype).element_size()
    return n_rows * n_cols * element_size


def estimate_memory_usage(n_samples: int, n_features: int,
                         chunk_size: Optional[int] = None,
                         dtype: torch.dtype = torch.int64) -> Dict[str, int]:
    """Estimate peak memory usage of one affinity propagation run.

    Args:
        n_samples: Number of samples N
        n_features: Number of features D
        chunk_size: Rows per similarity block (None for all rows)
        dtype: Matrix element type

    Returns:
        Dictionary with memory estimates in bytes
    """
    block_rows = n_samples if chunk_size is None else min(chunk_size, n_samples)
    element_size = torch.empty((), dtype=dtype).element_size()

    estimates = {}
    estimates['data'] = matrix_nbytes(n_samples, n_features, dtype)
    estimates['matrices'] = N_SQUARE_MATRICES * matrix_nbytes(n_samples, n_samples, dtype)
    # (block_rows, N, D) difference tensor built by the similarity stage
    estimates['similarity_workspace'] = block_rows * n_samples * n_features * element_size
    # s + a, its masked copy and the competitor matrix of the responsibility update
    estimates['update_workspace'] = 3 * matrix_nbytes(n_samples, n_samples, dtype)
    estimates['total'] = sum(estimates.values())
    return estimates


def check_memory_availability(required_memory: int,
                            device: Optional[torch.device] = None,
                            safety_factor: float = 1.2) -> bool:
    """Check if device has enough memory.

    Args:
        required_memory: Required memory in bytes
        device: Device to check
        safety_factor: Safety margin multiplier

    Returns:
        True if sufficient memory available
    """
    free = get_free_memory(device)
    if free is None:
        # Can't easily check CPU/MPS memory, assume it's sufficient
        return True
    return free >= int(required_memory * safety_factor)


def is_out_of_memory(exc: BaseException) -> bool:
    """Whether an exception raised by torch signals allocator exhaustion."""
    if isinstance(exc, (MemoryError, torch.cuda.OutOfMemoryError)):
        return True
    if isinstance(exc, RuntimeError):
        message = str(exc).lower()
        return 'out of memory' in message or "can't allocate memory" in message
    return False

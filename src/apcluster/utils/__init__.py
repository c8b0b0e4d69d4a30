"""Utility functions for affinity propagation."""

from .device import (
    get_default_device,
    parse_device,
    get_free_memory,
    matrix_nbytes,
    estimate_memory_usage,
    check_memory_availability,
    is_out_of_memory
)

from .convergence import (
    MessagesUnchanged,
    MaxIterations
)

from .validation import (
    validate_data,
    check_damping,
    check_max_iter,
    check_chunk_size,
    check_square
)

__all__ = [
    # Device management
    'get_default_device',
    'parse_device',
    'get_free_memory',
    'matrix_nbytes',
    'estimate_memory_usage',
    'check_memory_availability',
    'is_out_of_memory',

    # Convergence criteria
    'MessagesUnchanged',
    'MaxIterations',

    # Validation
    'validate_data',
    'check_damping',
    'check_max_iter',
    'check_chunk_size',
    'check_square'
]

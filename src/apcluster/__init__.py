"""
apcluster: Affinity Propagation clustering on dense integer matrices.

Affinity propagation finds exemplars (representative data points) without a
preset number of clusters, by passing responsibility and availability
messages between points until they reach a fixed point.

Example usage:
    >>> import torch
    >>> from apcluster import AffinityPropagation
    >>>
    >>> X = torch.tensor([[3, 4, 3, 2, 1],
    ...                   [4, 3, 5, 1, 1],
    ...                   [3, 5, 3, 3, 3],
    ...                   [2, 1, 3, 3, 2],
    ...                   [1, 1, 3, 2, 3]])
    >>>
    >>> model = AffinityPropagation(verbose=1)
    >>> exemplar_matrix = model.fit_predict(X)
    >>> model.exemplars_
    [0, 3]
"""

__version__ = '0.1.0'

from .base import (
    Matrix,
    RunContext,
    RunState,
    RoundState,
    APClusterError,
    AllocationError,
    InputFormatError,
    ConvergenceWarning
)

from .algorithms.affinity_propagation import AffinityPropagation, affinity_propagation

from .similarity import NegativeSquaredEuclidean, compute_similarity
from .updates import (
    compute_responsibility,
    compute_availability,
    damp,
    DEFAULT_DAMPING
)
from .assignments import (
    compute_criterion,
    extract_exemplars,
    exemplars_per_row,
    exemplar_indices
)

from .io import read_data_matrix, format_matrix, write_matrix

__all__ = [
    # Algorithm
    'AffinityPropagation',
    'affinity_propagation',

    # Stages
    'NegativeSquaredEuclidean',
    'compute_similarity',
    'compute_responsibility',
    'compute_availability',
    'damp',
    'DEFAULT_DAMPING',
    'compute_criterion',
    'extract_exemplars',
    'exemplars_per_row',
    'exemplar_indices',

    # Core data structures
    'Matrix',
    'RunContext',
    'RunState',
    'RoundState',

    # Errors
    'APClusterError',
    'AllocationError',
    'InputFormatError',
    'ConvergenceWarning',

    # Text I/O
    'read_data_matrix',
    'format_matrix',
    'write_matrix',

    # Version
    '__version__'
]

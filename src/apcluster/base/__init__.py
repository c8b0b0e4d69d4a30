"""Base classes, data structures and errors for affinity propagation.

The message-passing skeleton lives in ``base.clustering_base`` and is not
imported here, since it depends on the stage modules that build on this
package.
"""

from .exceptions import (
    APClusterError,
    AllocationError,
    InputFormatError,
    ConvergenceWarning
)

from .interfaces import (
    SimilarityMetric,
    MessageUpdater,
    ExemplarStrategy,
    ConvergenceCriterion
)

from .data_structures import (
    Matrix,
    RunContext,
    RunState,
    RoundState
)

__all__ = [
    # Errors
    'APClusterError',
    'AllocationError',
    'InputFormatError',
    'ConvergenceWarning',

    # Interfaces
    'SimilarityMetric',
    'MessageUpdater',
    'ExemplarStrategy',
    'ConvergenceCriterion',

    # Data structures
    'Matrix',
    'RunContext',
    'RunState',
    'RoundState'
]

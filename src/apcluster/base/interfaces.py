"""
Core interfaces for the affinity propagation engine.

This module defines the abstract base classes that the pipeline stages
implement, so the estimator can be assembled from interchangeable parts.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, TYPE_CHECKING
from torch import Tensor

if TYPE_CHECKING:
    from .data_structures import RunContext


class SimilarityMetric(ABC):
    """Abstract base class for pairwise similarity computations."""

    @abstractmethod
    def compute(self, data: Tensor, **kwargs) -> Tensor:
        """Compute pairwise similarities between data points.

        Args:
            data: (n, d) integer tensor of data points
            **kwargs: Metric-specific parameters

        Returns:
            (n, n) tensor of similarities, higher meaning more alike
        """
        pass


class MessageUpdater(ABC):
    """Abstract base class for one message-passing phase."""

    @abstractmethod
    def update(self, context: 'RunContext', **kwargs) -> Tensor:
        """Compute fresh (undamped) messages from the run context.

        Implementations read the context matrices and must not write them;
        the caller commits the returned values after damping.

        Args:
            context: Run context owning the message matrices
            **kwargs: Update-specific parameters

        Returns:
            (n, n) tensor of new message values
        """
        pass

    @property
    @abstractmethod
    def target(self) -> str:
        """Name of the run-context matrix this phase writes."""
        pass


class ExemplarStrategy(ABC):
    """Abstract base class for turning a criterion matrix into exemplars."""

    @abstractmethod
    def compute_exemplars(self, criterion: Tensor, **kwargs) -> Tensor:
        """Mark exemplar choices.

        Args:
            criterion: (n, n) criterion values
            **kwargs: Strategy-specific parameters

        Returns:
            (n, n) 0/1 tensor of exemplar marks
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []

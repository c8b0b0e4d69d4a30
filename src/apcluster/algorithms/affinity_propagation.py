"""
Affinity propagation clustering algorithm.

Exemplar-based clustering by message passing, assembled from the modular
stages: negative squared Euclidean similarity, damped responsibility and
availability updates, and row-maximum exemplar extraction.
"""

from typing import Optional, List, Union
import torch
from torch import Tensor

from ..base.clustering_base import BaseMessagePassingAlgorithm
from ..similarity.euclidean import NegativeSquaredEuclidean
from ..updates.responsibility import ResponsibilityUpdater
from ..updates.availability import AvailabilityUpdater
from ..updates.damping import Damping, DEFAULT_DAMPING
from ..assignments.exemplar import (
    MaxCriterionExemplars, exemplars_per_row, exemplar_indices
)
from ..utils.convergence import MessagesUnchanged, MaxIterations
from ..utils.validation import check_chunk_size
from ..utils.device import estimate_memory_usage


class AffinityPropagation(BaseMessagePassingAlgorithm):
    """Affinity propagation clustering.

    Identifies exemplars (representative data points) without a preset
    number of clusters. Each round updates responsibilities, then
    availabilities, damping both against the previous round. The run stops
    when a round leaves both matrices unchanged, or after ``max_iter``
    rounds.

    Parameters
    ----------
    damping : float, default=0.5
        Weight of the freshly computed message; the previous value gets
        ``1 - damping``. Both terms are truncated toward zero separately.
    max_iter : int or None, default=None
        Maximum number of rounds. None runs until the fixed point.
    chunk_size : int, optional
        Rows per block when computing similarities
    verbose : int, default=0
        Verbosity level
    device : torch.device, optional
        Device for computation (CPU/GPU)

    Attributes
    ----------
    exemplar_matrix_ : Tensor of shape (n_samples, n_samples)
        1 where column j attains row i's maximum criterion, else 0
    similarity_, responsibility_, availability_, criterion_ : Tensor
        Final (n_samples, n_samples) matrices of the run
    run_state_ : RunState
        STABLE or CAPPED
    n_iter_ : int
        Number of rounds run
    history_ : list of RoundState
        Per-round change flags and timings
    """

    def __init__(self,
                 damping: float = DEFAULT_DAMPING,
                 max_iter: Optional[int] = None,
                 chunk_size: Optional[int] = None,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        """Initialize affinity propagation."""
        super().__init__(
            damping=damping,
            max_iter=max_iter,
            verbose=verbose,
            device=device
        )
        self.chunk_size = check_chunk_size(chunk_size)

    def _create_components(self) -> None:
        """Create affinity propagation components."""
        self.similarity_metric = NegativeSquaredEuclidean(chunk_size=self.chunk_size)

        # Responsibility must be committed before availability reads it
        self.updaters = [ResponsibilityUpdater(), AvailabilityUpdater()]

        self.damping_step = Damping(self.damping)
        self.exemplar_strategy = MaxCriterionExemplars()
        self.convergence_criterion = MessagesUnchanged()
        self.iteration_cap = MaxIterations(self.max_iter)

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'AffinityPropagation':
        """Run affinity propagation.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            Integer training data
        y : Ignored
            Not used, present for API consistency

        Returns
        -------
        self : AffinityPropagation
            Fitted estimator
        """
        return super().fit(X, y)

    def _estimate_memory(self, n_points: int, n_features: int) -> int:
        return estimate_memory_usage(n_points, n_features,
                                     chunk_size=self.chunk_size)['total']

    @property
    def exemplars_(self) -> List[int]:
        """Indices of points chosen as exemplar by at least one point."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return exemplar_indices(self.exemplar_matrix_)

    @property
    def exemplars_per_row_(self) -> List[List[int]]:
        """For each point, the exemplar column(s) it marks."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return exemplars_per_row(self.exemplar_matrix_)

    def get_params(self, deep: bool = True) -> dict:
        params = super().get_params(deep)
        params['chunk_size'] = self.chunk_size
        return params

    def set_params(self, **params) -> 'AffinityPropagation':
        if 'chunk_size' in params:
            self.chunk_size = check_chunk_size(params.pop('chunk_size'))
        return super().set_params(**params)


def affinity_propagation(X: Tensor,
                         damping: float = DEFAULT_DAMPING,
                         max_iter: Optional[int] = None,
                         device: Optional[Union[str, torch.device]] = None) -> Tensor:
    """Run affinity propagation and return the (n, n) exemplar matrix."""
    model = AffinityPropagation(damping=damping, max_iter=max_iter, device=device)
    return model.fit_predict(X)

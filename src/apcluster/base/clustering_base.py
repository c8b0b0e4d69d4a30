"""
Base class for message-passing clustering algorithms.

Provides the common skeleton: similarity stage, a bounded loop of damped
message-passing rounds, and exemplar extraction from the final messages.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union
import torch
from torch import Tensor
import time
import warnings

from .interfaces import (
    SimilarityMetric, MessageUpdater, ExemplarStrategy, ConvergenceCriterion
)
from .data_structures import Matrix, RunContext, RunState, RoundState
from .exceptions import AllocationError, ConvergenceWarning
from ..similarity.euclidean import compute_similarity
from ..assignments.exemplar import compute_criterion
from ..utils.validation import validate_data, check_damping, check_max_iter
from ..utils.device import (
    parse_device, estimate_memory_usage, check_memory_availability, is_out_of_memory
)
from ..io import format_matrix


class BaseMessagePassingAlgorithm:
    """Base class implementing the message-passing framework.

    Subclasses need to specify:
    - Similarity metric
    - Message updaters, in phase order
    - Damping step
    - Exemplar strategy
    - Convergence criterion and iteration cap
    """

    def __init__(self,
                 damping: float = 0.5,
                 max_iter: Optional[int] = None,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            damping: Weight of freshly computed messages, in (0, 1]
            max_iter: Maximum rounds (None for no cap)
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            device: Torch device (None for CPU)
        """
        self.damping = check_damping(damping)
        self.max_iter = check_max_iter(max_iter)
        self.verbose = verbose
        self.device = parse_device(device)

        # These will be set by subclasses
        self.similarity_metric: Optional[SimilarityMetric] = None
        self.updaters: Optional[List[MessageUpdater]] = None
        self.damping_step = None
        self.exemplar_strategy: Optional[ExemplarStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.iteration_cap: Optional[ConvergenceCriterion] = None

        self._reset_fitted()

    def _reset_fitted(self) -> None:
        self.fitted_ = False
        self.n_iter_ = 0
        self.history_: List[RoundState] = []
        self.run_state_: Optional[RunState] = None
        self.similarity_: Optional[Tensor] = None
        self.responsibility_: Optional[Tensor] = None
        self.availability_: Optional[Tensor] = None
        self.criterion_: Optional[Tensor] = None
        self.exemplar_matrix_: Optional[Tensor] = None

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.similarity_metric
        - self.updaters
        - self.damping_step
        - self.exemplar_strategy
        - self.convergence_criterion
        - self.iteration_cap
        """
        pass

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'BaseMessagePassingAlgorithm':
        """Run the algorithm.

        Args:
            X: (n, d) integer data
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        return self._fit(X)

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Run the algorithm and return the (n, n) exemplar matrix."""
        self._fit(X)
        return self.exemplar_matrix_

    def _fit(self, X: Tensor) -> 'BaseMessagePassingAlgorithm':
        """Internal fit method: similarity, rounds, extraction."""
        X = self._validate_data(X)
        n_points, dimension = X.shape

        self._create_components()
        self._reset_fitted()

        if self.verbose:
            print(f"Affinity propagation on {n_points} points, {dimension} features "
                  f"(damping={self.damping}, max_iter={self.max_iter})")

        start_time = time.time()
        context = RunContext(n_points, device=self.device)
        try:
            context.stage = 'similarity'
            self._check_memory(n_points, dimension)
            context.allocate()
            compute_similarity(X, context.similarity, self.similarity_metric)
            if self.verbose >= 2:
                self._print_matrix("Similarity", context.similarity)

            context.stage = 'update'
            run_state, history = self._run_rounds(context)

            context.stage = 'extraction'
            context.criterion.assign_(compute_criterion(context.responsibility.values,
                                                        context.availability.values))
            exemplars = self.exemplar_strategy.compute_exemplars(context.criterion.values)
            context.allocate_exemplars().assign_(exemplars)
            if self.verbose >= 2:
                self._print_matrix("Criterion", context.criterion)

            results = {
                name: getattr(context, name).copy().values
                for name in RunContext.OWNED_NAMES
            }
        except AllocationError as exc:
            exc.stage = context.stage
            if self.verbose:
                print(f"Run aborted: {exc}")
            raise
        except (MemoryError, RuntimeError) as exc:
            if not is_out_of_memory(exc):
                raise
            error = AllocationError(f"Out of memory: {exc}", stage=context.stage)
            if self.verbose:
                print(f"Run aborted: {error}")
            raise error from exc
        finally:
            context.destroy()

        self.similarity_ = results['similarity']
        self.responsibility_ = results['responsibility']
        self.availability_ = results['availability']
        self.criterion_ = results['criterion']
        self.exemplar_matrix_ = results['exemplars']
        self.history_ = history
        self.n_iter_ = len(history)
        self.run_state_ = run_state

        total_time = time.time() - start_time

        if self.verbose:
            if run_state is RunState.CAPPED:
                warnings.warn(f"Failed to converge after {self.max_iter} iterations",
                              ConvergenceWarning)
            else:
                print(f"Converged at iteration {self.n_iter_}")
            print(f"Total fitting time: {total_time:.3f}s")

        self.fitted_ = True
        return self

    def _run_rounds(self, context: RunContext):
        """Convergence controller: repeat rounds until STABLE or CAPPED."""
        self.convergence_criterion.reset()
        self.iteration_cap.reset()

        state = RunState.RUNNING
        history: List[RoundState] = []

        while state is RunState.RUNNING:
            round_start = time.time()
            old_responsibility, old_availability = context.snapshot()
            try:
                previous = {
                    'responsibility': old_responsibility,
                    'availability': old_availability
                }
                for updater in self.updaters:
                    fresh = updater.update(context)
                    target = getattr(context, updater.target)
                    target.assign_(self.damping_step.apply(fresh, previous[updater.target].values))

                n_iter = len(history) + 1
                converged = self.convergence_criterion.check({
                    'iteration': n_iter,
                    'responsibility': context.responsibility,
                    'availability': context.availability,
                    'old_responsibility': old_responsibility,
                    'old_availability': old_availability
                })
            finally:
                old_responsibility.destroy()
                old_availability.destroy()

            changes = self.convergence_criterion.history[-1]
            round_state = RoundState(
                iteration=n_iter,
                responsibility_changed=changes['responsibility_changed'],
                availability_changed=changes['availability_changed'],
                elapsed=time.time() - round_start
            )
            history.append(round_state)

            if converged:
                state = RunState.STABLE
            elif self.iteration_cap.check({'n_iter': n_iter}):
                state = RunState.CAPPED

            if self.verbose >= 2:
                print(f"\nRound {n_iter:3d} ({round_state.elapsed:.3f}s)")
                self._print_matrix("Responsibility", context.responsibility)
                self._print_matrix("Availability", context.availability)
            elif self.verbose >= 1 and n_iter % 10 == 0:
                print(f"Round {n_iter:3d}: responsibility "
                      f"{'changed' if round_state.responsibility_changed else 'stable'}, "
                      f"availability {'changed' if round_state.availability_changed else 'stable'}")

        return state, history

    @staticmethod
    def _print_matrix(label: str, matrix: Matrix) -> None:
        print(f"\n{label} :")
        print(format_matrix(matrix), end='')

    def _validate_data(self, X: Tensor) -> Tensor:
        """Validate and prepare input data."""
        return validate_data(X, device=self.device)

    def _estimate_memory(self, n_points: int, n_features: int) -> int:
        """Peak bytes a run on ``n_points`` points is expected to need."""
        return estimate_memory_usage(n_points, n_features)['total']

    def _check_memory(self, n_points: int, n_features: int) -> None:
        """Refuse to start a run the device cannot hold."""
        required = self._estimate_memory(n_points, n_features)
        if not check_memory_availability(required, self.device):
            raise AllocationError(
                f"Not enough free memory on {self.device} for {n_points} points "
                f"({required} bytes needed)",
                shape=(n_points, n_points)
            )

    @property
    def converged_(self) -> bool:
        """Whether the last run reached a fixed point."""
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")
        return self.run_state_ is RunState.STABLE

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'damping': self.damping,
            'max_iter': self.max_iter,
            'verbose': self.verbose,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseMessagePassingAlgorithm':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key!r} for {type(self).__name__}")
            if key == 'damping':
                value = check_damping(value)
            elif key == 'max_iter':
                value = check_max_iter(value)
            elif key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self

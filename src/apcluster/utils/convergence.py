"""
Convergence criteria for message passing.

Affinity propagation stops when a round leaves the message matrices
exactly as they were, or when an iteration cap is hit.
"""

from typing import Dict, Any, Optional
import torch

from ..base.interfaces import ConvergenceCriterion


class MessagesUnchanged(ConvergenceCriterion):
    """Convergence when responsibility and availability are bitwise unchanged.

    Expects the state dictionary to carry the committed matrices under
    'responsibility' / 'availability' and the pre-round snapshots under
    'old_responsibility' / 'old_availability'. Values may be ``Matrix``
    instances or tensors.
    """

    @staticmethod
    def _same(a, b) -> bool:
        if hasattr(a, 'equals'):
            return a.equals(b)
        return a.shape == b.shape and torch.equal(a, b)

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if both message matrices are unchanged."""
        responsibility_changed = not self._same(current_state['responsibility'],
                                                current_state['old_responsibility'])
        availability_changed = not self._same(current_state['availability'],
                                              current_state['old_availability'])

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'responsibility_changed': responsibility_changed,
            'availability_changed': availability_changed
        })

        return not (responsibility_changed or availability_changed)


class MaxIterations(ConvergenceCriterion):
    """Iteration cap. ``max_iter=None`` never triggers."""

    def __init__(self, max_iter: Optional[int] = None):
        super().__init__()
        if max_iter is not None and max_iter < 1:
            raise ValueError(f"max_iter must be positive or None, got {max_iter}")
        self.max_iter = max_iter

    def check(self, current_state: Dict[str, Any]) -> bool:
        """True once the completed round count reaches the cap."""
        if self.max_iter is None:
            return False
        n_rounds = current_state['n_iter']
        self.history.append({'n_iter': n_rounds})
        return n_rounds >= self.max_iter

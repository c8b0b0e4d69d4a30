"""
Damping of message updates.

Blends each freshly computed message with its value from the previous
round to keep the fixed-point iteration from oscillating.
"""

import torch
from torch import Tensor

from ..utils.validation import check_damping


DEFAULT_DAMPING = 0.5


def damp(new: Tensor, old: Tensor, damping: float = DEFAULT_DAMPING) -> Tensor:
    """Return trunc(new * damping) + trunc(old * (1 - damping)).

    Each term is truncated toward zero on its own before the sum; rounding
    the combined value instead changes the iteration.

    Args:
        new: (n, n) freshly computed integer messages
        old: (n, n) messages from the previous round
        damping: Weight of the new value

    Returns:
        (n, n) int64 tensor
    """
    if new.shape != old.shape:
        raise ValueError(f"Shape mismatch: {tuple(new.shape)} vs {tuple(old.shape)}")

    fresh = torch.trunc(new.to(torch.float64) * damping).to(torch.int64)
    prior = torch.trunc(old.to(torch.float64) * (1.0 - damping)).to(torch.int64)
    return fresh + prior


class Damping:
    """Damping step with a fixed factor."""

    def __init__(self, damping: float = DEFAULT_DAMPING):
        """
        Args:
            damping: Weight of the freshly computed value, in (0, 1]
        """
        self.damping = check_damping(damping)

    def apply(self, new: Tensor, old: Tensor) -> Tensor:
        return damp(new, old, self.damping)

    def __repr__(self) -> str:
        return f"Damping(damping={self.damping})"

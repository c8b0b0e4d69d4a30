"""
Availability update.

a(i, i) = sum_{k != i} max(0, r(k, i))
a(i, j) = min(0, r(j, j) + sum_{k not in {i, j}} max(0, r(k, j)))   for i != j

Self-availability collects the positive support a candidate receives.
Availability towards another candidate is capped at zero, so it can only
constrain a choice, never encourage it.
"""

import torch
from torch import Tensor

from ..base.interfaces import MessageUpdater
from ..utils.validation import check_square


def compute_availability(responsibility: Tensor) -> Tensor:
    """Compute undamped availabilities from committed responsibilities.

    Args:
        responsibility: (n, n) responsibilities of the current round

    Returns:
        (n, n) int64 tensor of availabilities
    """
    check_square(responsibility, 'responsibility')

    n = responsibility.shape[0]
    idx = torch.arange(n, device=responsibility.device)

    positive = responsibility.clamp(min=0)
    # Column-wise positive support excluding the candidate itself
    support = positive.sum(dim=0) - positive.diagonal()

    availability = (responsibility.diagonal() + support).unsqueeze(0) - positive
    availability = availability.clamp(max=0)
    availability[idx, idx] = support

    return availability


class AvailabilityUpdater(MessageUpdater):
    """Availability phase: reads the responsibility committed this round."""

    @property
    def target(self) -> str:
        return 'availability'

    def update(self, context, **kwargs) -> Tensor:
        return compute_availability(context.responsibility.values)

"""
Responsibility update.

r(i, j) = s(i, j) - max_{k != j} (s(i, k) + a(i, k))

The responsibility sent from candidate j to point i is the evidence that j
is the best exemplar for i, net of the strongest competing candidate.
"""

import torch
from torch import Tensor

from ..base.interfaces import MessageUpdater
from ..utils.validation import check_square


def compute_responsibility(similarity: Tensor, availability: Tensor) -> Tensor:
    """Compute undamped responsibilities.

    For each row only the largest and second largest of s + a are needed:
    the competitor of column j is the row maximum unless j is the column
    holding it, in which case it is the runner-up. With a single point there
    is no competitor and the term is 0.

    Args:
        similarity: (n, n) similarity matrix
        availability: (n, n) availability from the previous round

    Returns:
        (n, n) int64 tensor of responsibilities
    """
    check_square(similarity, 'similarity')
    if availability.shape != similarity.shape:
        raise ValueError(f"Shape mismatch: similarity {tuple(similarity.shape)} "
                         f"vs availability {tuple(availability.shape)}")

    n = similarity.shape[0]
    if n < 2:
        return similarity.clone()

    combined = similarity + availability
    rows = torch.arange(n, device=combined.device)

    first, best = combined.max(dim=1)
    masked = combined.clone()
    masked[rows, best] = torch.iinfo(masked.dtype).min
    second = masked.max(dim=1).values

    competitor = first.unsqueeze(1).repeat(1, n)
    competitor[rows, best] = second

    return similarity - competitor


class ResponsibilityUpdater(MessageUpdater):
    """Responsibility phase: reads similarity and the previous availability."""

    @property
    def target(self) -> str:
        return 'responsibility'

    def update(self, context, **kwargs) -> Tensor:
        return compute_responsibility(context.similarity.values,
                                      context.availability.values)

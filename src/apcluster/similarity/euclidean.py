"""
Negative squared Euclidean similarity.

The similarity of two points is minus their squared Euclidean distance, so
closer points are more similar and every off-diagonal value is <= 0.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import SimilarityMetric
from ..base.data_structures import Matrix
from ..utils.validation import check_chunk_size


class NegativeSquaredEuclidean(SimilarityMetric):
    """Similarity -||x_i - x_j||² computed in exact integer arithmetic."""

    def __init__(self, chunk_size: Optional[int] = None):
        """
        Args:
            chunk_size: Rows processed per block. None processes all rows at
                once, which builds an (n, n, d) difference tensor.
        """
        self.chunk_size = check_chunk_size(chunk_size)

    def compute(self, data: Tensor, **kwargs) -> Tensor:
        """Compute pairwise similarities.

        Args:
            data: (n, d) integer tensor of points

        Returns:
            (n, n) int64 tensor; the diagonal is 0
        """
        n = data.shape[0]
        data = data.to(torch.int64)
        step = n if self.chunk_size is None else self.chunk_size

        similarities = torch.empty((n, n), dtype=torch.int64, device=data.device)
        for start in range(0, n, max(step, 1)):
            block = data[start:start + step]
            diff = block.unsqueeze(1) - data.unsqueeze(0)
            similarities[start:start + step] = -(diff * diff).sum(dim=2)

        return similarities


def compute_similarity(data: Tensor, similarity: Matrix,
                       metric: Optional[SimilarityMetric] = None) -> Matrix:
    """Fill a zero-filled similarity matrix in place.

    Pairwise similarities are accumulated into ``similarity``, so calling this
    twice on the same matrix double-counts. Afterwards every self-similarity
    is set to the minimum of the whole matrix, where the zero diagonal still
    takes part in the search.

    Args:
        data: (n, d) integer tensor of points
        similarity: (n, n) zero-filled matrix to write
        metric: Pairwise metric (default: NegativeSquaredEuclidean)

    Returns:
        The same ``similarity`` matrix
    """
    if metric is None:
        metric = NegativeSquaredEuclidean()

    n = data.shape[0]
    if similarity.shape != (n, n):
        raise ValueError(f"Similarity matrix must be ({n}, {n}), got {similarity.shape}")

    values = similarity.values
    values.add_(metric.compute(data).to(values.device))

    # Anchor self-similarity at or below every pairwise value
    minimum = values.min().item()
    values.fill_diagonal_(minimum)

    return similarity

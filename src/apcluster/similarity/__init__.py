"""Similarity metrics for affinity propagation."""

from .euclidean import NegativeSquaredEuclidean, compute_similarity

__all__ = [
    'NegativeSquaredEuclidean',
    'compute_similarity'
]

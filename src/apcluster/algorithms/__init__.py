"""Clustering algorithm implementations."""

from .affinity_propagation import AffinityPropagation, affinity_propagation

__all__ = [
    'AffinityPropagation',
    'affinity_propagation'
]

"""Exemplar extraction from the criterion matrix."""

from .exemplar import (
    MaxCriterionExemplars,
    compute_criterion,
    extract_exemplars,
    exemplars_per_row,
    exemplar_indices,
    has_ties
)

__all__ = [
    'MaxCriterionExemplars',
    'compute_criterion',
    'extract_exemplars',
    'exemplars_per_row',
    'exemplar_indices',
    'has_ties'
]

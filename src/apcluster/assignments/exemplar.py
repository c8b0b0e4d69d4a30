"""
Criterion computation and exemplar extraction.

The criterion c(i, j) = r(i, j) + a(i, j) scores candidate j as exemplar of
point i. Every column attaining a row's maximum is marked; ties are kept, so
a row may mark more than one exemplar.
"""

from typing import List, Union
import torch
from torch import Tensor

from ..base.interfaces import ExemplarStrategy
from ..base.data_structures import Matrix
from ..utils.validation import check_square


def compute_criterion(responsibility: Tensor, availability: Tensor) -> Tensor:
    """Element-wise sum of responsibility and availability."""
    if responsibility.shape != availability.shape:
        raise ValueError(f"Shape mismatch: {tuple(responsibility.shape)} "
                         f"vs {tuple(availability.shape)}")
    return responsibility + availability


def extract_exemplars(criterion: Tensor) -> Tensor:
    """Mark every column attaining its row's maximum criterion.

    Args:
        criterion: (n, n) criterion values

    Returns:
        (n, n) int64 tensor of 0/1 marks; every row has at least one 1
    """
    check_square(criterion, 'criterion')
    row_max = criterion.max(dim=1, keepdim=True).values
    return (criterion == row_max).to(torch.int64)


class MaxCriterionExemplars(ExemplarStrategy):
    """Row-maximum exemplar marking with ties preserved."""

    def compute_exemplars(self, criterion: Tensor, **kwargs) -> Tensor:
        return extract_exemplars(criterion)


def _as_tensor(exemplar_matrix: Union[Matrix, Tensor]) -> Tensor:
    if isinstance(exemplar_matrix, Matrix):
        return exemplar_matrix.values
    return exemplar_matrix


def exemplars_per_row(exemplar_matrix: Union[Matrix, Tensor]) -> List[List[int]]:
    """Columns marked in each row, in ascending order."""
    marks = _as_tensor(exemplar_matrix)
    return [torch.nonzero(row, as_tuple=True)[0].tolist() for row in marks]


def exemplar_indices(exemplar_matrix: Union[Matrix, Tensor]) -> List[int]:
    """Sorted columns marked by at least one row."""
    marks = _as_tensor(exemplar_matrix)
    return torch.nonzero(marks.any(dim=0), as_tuple=True)[0].tolist()


def has_ties(exemplar_matrix: Union[Matrix, Tensor]) -> bool:
    """True if any row marks more than one exemplar."""
    marks = _as_tensor(exemplar_matrix)
    return bool((marks.sum(dim=1) > 1).any())

"""Visualization utilities for exemplar results."""

from .plot_exemplars import plot_exemplars_2d

__all__ = [
    'plot_exemplars_2d'
]

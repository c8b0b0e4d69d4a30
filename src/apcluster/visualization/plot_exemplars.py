"""
Exemplar visualization utilities.

Scatter plots of 2D data with each point linked to the exemplar(s) it
marks in the exemplar matrix.
"""

from typing import Optional, List, Union
from torch import Tensor
import matplotlib.pyplot as plt
import numpy as np

from ..base.data_structures import Matrix
from ..assignments.exemplar import exemplars_per_row, exemplar_indices


def plot_exemplars_2d(X: Union[Tensor, np.ndarray],
                      exemplar_matrix: Union[Matrix, Tensor],
                      ax: Optional[plt.Axes] = None,
                      colors: Optional[List[str]] = None,
                      alpha: float = 0.7,
                      exemplar_marker: str = 'X',
                      exemplar_size: int = 200,
                      point_size: int = 50,
                      show_links: bool = True,
                      show_legend: bool = True,
                      title: Optional[str] = None) -> plt.Axes:
    """Plot 2D points coloured by exemplar.

    Points whose row marks several exemplars are drawn with a red edge and
    linked to every marked exemplar.

    Args:
        X: (n, 2) data points
        exemplar_matrix: (n, n) 0/1 exemplar marks
        ax: Matplotlib axes (created if None)
        colors: List of colors, one per exemplar
        alpha: Point transparency
        exemplar_marker: Marker for exemplars
        exemplar_size: Size of exemplar markers
        point_size: Size of data points
        show_links: Draw a line from each point to its exemplar(s)
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    X_np = X.detach().cpu().numpy() if isinstance(X, Tensor) else np.asarray(X)
    if X_np.ndim != 2 or X_np.shape[1] != 2:
        raise ValueError(f"Expected (n, 2) data, got shape {X_np.shape}")

    per_row = exemplars_per_row(exemplar_matrix)
    exemplars = exemplar_indices(exemplar_matrix)
    n_exemplars = len(exemplars)

    if colors is None:
        cmap = plt.get_cmap('tab10' if n_exemplars <= 10 else 'tab20')
        colors = [cmap(i / max(n_exemplars, 1)) for i in range(n_exemplars)]
    color_of = {e: colors[i % len(colors)] for i, e in enumerate(exemplars)}

    if show_links:
        for i, marked in enumerate(per_row):
            for e in marked:
                if e != i:
                    ax.plot([X_np[i, 0], X_np[e, 0]], [X_np[i, 1], X_np[e, 1]],
                            color=color_of[e], alpha=0.3, linewidth=1, zorder=1)

    for e in exemplars:
        members = [i for i, marked in enumerate(per_row) if marked[0] == e]
        if not members:
            continue
        edge = ['red' if len(per_row[i]) > 1 else 'black' for i in members]
        ax.scatter(X_np[members, 0], X_np[members, 1],
                   c=[color_of[e]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors=edge,
                   linewidth=0.5,
                   label=f'Exemplar {e}',
                   zorder=2)

    ax.scatter(X_np[exemplars, 0], X_np[exemplars, 1],
               c='black',
               marker=exemplar_marker,
               s=exemplar_size,
               edgecolors='white',
               linewidth=2,
               label='Exemplars',
               zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax

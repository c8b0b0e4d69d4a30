"""
Text ingestion and formatting.

Reads integer data matrices from delimited text (one row per line, a fixed
field delimiter, base-10 integer fields) and renders matrices as
whitespace-separated rows.
"""

from typing import Optional, Union, TextIO
from pathlib import Path
import sys
import warnings
import numpy as np
import torch
from torch import Tensor

from .base.exceptions import InputFormatError
from .base.data_structures import Matrix


def read_data_matrix(source: Union[str, Path, TextIO],
                     delimiter: str = ',',
                     device: Optional[torch.device] = None) -> Tensor:
    """Read a delimited integer data matrix.

    Blank lines are skipped. Every non-blank line must have the same number
    of fields.

    Args:
        source: Path or open text stream
        delimiter: Field delimiter
        device: Target device of the returned tensor

    Returns:
        (n, d) int64 tensor

    Raises:
        InputFormatError: On ragged rows, non-integer fields, or no data
    """
    name = getattr(source, 'name', source)
    try:
        with warnings.catch_warnings():
            # loadtxt warns on empty input; reported below as an error instead
            warnings.simplefilter('ignore', UserWarning)
            array = np.loadtxt(source, dtype=np.int64, delimiter=delimiter, ndmin=2)
    except ValueError as exc:
        raise InputFormatError(f"Cannot parse {name}: {exc}") from exc

    if array.size == 0:
        raise InputFormatError(f"No data found in {name}")

    return torch.from_numpy(array).to(device=device if device is not None else 'cpu')


def format_matrix(matrix: Union[Matrix, Tensor, np.ndarray, list]) -> str:
    """Render a matrix as text, each cell followed by a space, one row per line."""
    if isinstance(matrix, Matrix):
        rows = matrix.tolist()
    elif isinstance(matrix, Tensor):
        rows = matrix.detach().cpu().tolist()
    else:
        rows = np.asarray(matrix).tolist()

    return ''.join(
        ''.join(f"{value} " for value in row) + '\n'
        for row in rows
    )


def write_matrix(matrix: Union[Matrix, Tensor, np.ndarray, list],
                 out: Optional[TextIO] = None) -> None:
    """Write ``format_matrix(matrix)`` to a text stream (default stdout)."""
    if out is None:
        out = sys.stdout
    out.write(format_matrix(matrix))

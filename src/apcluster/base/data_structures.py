"""
Core data structures for affinity propagation.

This module provides the dense matrix container used for every message
matrix, and the run context that owns the matrices of a single run.
"""

from typing import Optional, Tuple, List, Union
from enum import Enum
import torch
from torch import Tensor
from dataclasses import dataclass

from .exceptions import AllocationError
from ..utils.device import parse_device, matrix_nbytes, check_memory_availability


class Matrix:
    """Dense 2D integer matrix backed by one contiguous row-major tensor.

    A matrix exclusively owns its storage. After ``destroy()`` the storage is
    released and any access to the values raises ``RuntimeError``.
    """

    def __init__(self, values: Tensor):
        """
        Args:
            values: (rows, cols) tensor, taken over without copying
        """
        if values.dim() != 2:
            raise ValueError(f"Expected 2D tensor, got {values.dim()}D")
        self._values: Optional[Tensor] = values.contiguous()

    @classmethod
    def create(cls, n_rows: int, n_cols: int,
               device: Optional[Union[str, torch.device]] = None,
               dtype: torch.dtype = torch.int64) -> 'Matrix':
        """Create a zero-filled matrix.

        Raises:
            AllocationError: If storage cannot be obtained
        """
        if n_rows < 0 or n_cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got ({n_rows}, {n_cols})")

        device = parse_device(device)
        shape = (n_rows, n_cols)

        if not check_memory_availability(matrix_nbytes(n_rows, n_cols, dtype), device,
                                         safety_factor=1.0):
            raise AllocationError(f"Failed to create Matrix: not enough free memory on {device}",
                                  shape=shape)
        try:
            values = torch.zeros(shape, dtype=dtype, device=device)
        except (MemoryError, RuntimeError) as exc:
            raise AllocationError(f"Failed to create Matrix: {exc}", shape=shape) from exc

        return cls(values)

    @classmethod
    def from_values(cls, values: Union[Tensor, List[List[int]]],
                    device: Optional[Union[str, torch.device]] = None) -> 'Matrix':
        """Build a matrix holding a copy of the given values."""
        device = parse_device(device)
        if isinstance(values, Tensor):
            tensor = values.detach().to(device=device, dtype=torch.int64).clone()
        else:
            tensor = torch.tensor(values, dtype=torch.int64, device=device)
        return cls(tensor)

    @property
    def values(self) -> Tensor:
        """Underlying (rows, cols) tensor."""
        if self._values is None:
            raise RuntimeError("Matrix has been destroyed")
        return self._values

    @property
    def n_rows(self) -> int:
        return self.values.shape[0]

    @property
    def n_cols(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.n_rows, self.n_cols)

    @property
    def device(self) -> torch.device:
        return self.values.device

    @property
    def is_destroyed(self) -> bool:
        return self._values is None

    def copy(self) -> 'Matrix':
        """Return an independent deep clone.

        Raises:
            AllocationError: If storage for the clone cannot be obtained
        """
        values = self.values
        if not check_memory_availability(values.numel() * values.element_size(),
                                         values.device, safety_factor=1.0):
            raise AllocationError(f"Failed to copy Matrix: not enough free memory on {values.device}",
                                  shape=self.shape)
        try:
            return Matrix(values.clone())
        except (MemoryError, RuntimeError) as exc:
            raise AllocationError(f"Failed to copy Matrix: {exc}", shape=self.shape) from exc

    def equals(self, other: 'Matrix') -> bool:
        """True iff dimensions and every cell match."""
        if self.shape != other.shape:
            return False
        return torch.equal(self.values, other.values)

    def assign_(self, values: Tensor) -> 'Matrix':
        """Overwrite all cells in place."""
        self.values.copy_(values)
        return self

    def destroy(self) -> None:
        """Release the owned storage."""
        self._values = None

    def tolist(self) -> List[List[int]]:
        return self.values.tolist()

    def __getitem__(self, index):
        return self.values[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        if self.is_destroyed:
            return "Matrix(<destroyed>)"
        return f"Matrix(shape={self.shape}, values={self.tolist()})"


class RunState(Enum):
    """States of the convergence controller."""
    RUNNING = 'running'
    STABLE = 'stable'
    CAPPED = 'capped'

    @property
    def is_terminal(self) -> bool:
        return self is not RunState.RUNNING


class RunContext:
    """Owns every matrix of one affinity propagation run.

    The four message-passing matrices are created by ``allocate()``, the
    exemplar matrix by ``allocate_exemplars()``. ``destroy()`` (or leaving
    the ``with`` block) releases all of them. The context tracks the
    active stage so allocation failures can be reported against it.

    Example:
        >>> with RunContext(n_points=5) as ctx:
        ...     ctx.allocate()
        ...     ctx.similarity.assign_(...)
    """

    MATRIX_NAMES = ('similarity', 'responsibility', 'availability', 'criterion')
    OWNED_NAMES = MATRIX_NAMES + ('exemplars',)

    def __init__(self, n_points: int,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            n_points: Number of data points N
            device: Torch device for all matrices
        """
        self.n_points = n_points
        self.device = parse_device(device)
        self.stage: Optional[str] = None

        self.similarity: Optional[Matrix] = None
        self.responsibility: Optional[Matrix] = None
        self.availability: Optional[Matrix] = None
        self.criterion: Optional[Matrix] = None
        self.exemplars: Optional[Matrix] = None

    def allocate(self) -> 'RunContext':
        """Create the zero-filled N x N matrices.

        On failure every matrix created so far is released before the
        ``AllocationError`` propagates.
        """
        n = self.n_points
        try:
            for name in self.MATRIX_NAMES:
                setattr(self, name, Matrix.create(n, n, device=self.device))
        except AllocationError:
            self.destroy()
            raise
        return self

    def allocate_exemplars(self) -> Matrix:
        """Create the zero-filled N x N exemplar matrix."""
        self.exemplars = Matrix.create(self.n_points, self.n_points, device=self.device)
        return self.exemplars

    @property
    def is_allocated(self) -> bool:
        return all(
            getattr(self, name) is not None and not getattr(self, name).is_destroyed
            for name in self.MATRIX_NAMES
        )

    def snapshot(self) -> Tuple[Matrix, Matrix]:
        """Deep copies of the current responsibility and availability."""
        old_responsibility = self.responsibility.copy()
        try:
            old_availability = self.availability.copy()
        except AllocationError:
            old_responsibility.destroy()
            raise
        return old_responsibility, old_availability

    def destroy(self) -> None:
        """Release all owned matrices."""
        for name in self.OWNED_NAMES:
            matrix = getattr(self, name)
            if matrix is not None:
                matrix.destroy()
            setattr(self, name, None)

    def __enter__(self) -> 'RunContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.destroy()


@dataclass
class RoundState:
    """Outcome of one message-passing round.

    Used for convergence checking and debugging.
    """
    iteration: int
    responsibility_changed: bool
    availability_changed: bool
    elapsed: float = 0.0

    @property
    def stable(self) -> bool:
        return not (self.responsibility_changed or self.availability_changed)

"""Exception hierarchy for the apcluster package."""

from typing import Optional, Tuple


class APClusterError(Exception):
    """Base class for all apcluster errors."""
    pass


class AllocationError(APClusterError, MemoryError):
    """A matrix could not obtain storage.

    Attributes:
        shape: (rows, cols) of the matrix that failed to allocate
        stage: Run stage that was active ('similarity', 'update',
            'extraction') or None when raised outside a run
    """

    def __init__(self, message: str,
                 shape: Optional[Tuple[int, int]] = None,
                 stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.shape = shape
        self.stage = stage

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        return f"[{self.stage}] {self.message}"


class InputFormatError(APClusterError, ValueError):
    """Delimited input could not be parsed into an integer data matrix."""
    pass


class ConvergenceWarning(UserWarning):
    """Message passing stopped at the iteration cap without reaching a fixed point."""
    pass

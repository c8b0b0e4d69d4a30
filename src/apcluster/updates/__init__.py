"""Message update phases for affinity propagation."""

from .responsibility import ResponsibilityUpdater, compute_responsibility
from .availability import AvailabilityUpdater, compute_availability
from .damping import Damping, damp, DEFAULT_DAMPING

__all__ = [
    'ResponsibilityUpdater',
    'compute_responsibility',
    'AvailabilityUpdater',
    'compute_availability',
    'Damping',
    'damp',
    'DEFAULT_DAMPING'
]

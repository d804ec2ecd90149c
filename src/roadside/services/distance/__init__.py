"""Batched travel-distance resolution with straight-line fallback."""

from .matrix_client import DistanceMatrixClient, MatrixElement
from .models import DistanceFilterResult, ResolutionStatus, ResolverConfig
from .resolver import DistanceResolver, select_mode

__all__ = [
    "DistanceFilterResult",
    "DistanceMatrixClient",
    "DistanceResolver",
    "MatrixElement",
    "ResolutionStatus",
    "ResolverConfig",
    "select_mode",
]

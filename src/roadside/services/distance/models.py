"""Result types for distance resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ...config import settings
from ...errors import DistanceServiceError, ElementUnresolved
from ...models.domain import Place, TravelEstimate, TravelMode


class ResolutionStatus(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    FALLBACK = "fallback"


class ElementStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class BatchStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    batch_size: int = 25
    walking_threshold_m: int = 2000

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= 25:
            raise ValueError("batch_size must be between 1 and 25.")

    @classmethod
    def from_settings(cls) -> "ResolverConfig":
        return cls(batch_size=settings.matrix_batch_size, walking_threshold_m=settings.walking_threshold_m)


@dataclass(slots=True)
class ElementOutcome:
    place: Place
    status: ElementStatus
    estimate: TravelEstimate
    cause: Optional[ElementUnresolved] = None


@dataclass(slots=True)
class BatchOutcome:
    index: int
    status: BatchStatus
    elements: list[ElementOutcome] = field(default_factory=list)
    error: Optional[DistanceServiceError] = None


@dataclass(slots=True)
class DistanceFilterResult:
    """Outcome of one ``filter_by_distance`` call.

    ``status`` is ``ok`` when every kept distance came from the matrix,
    ``partial`` when some candidates fell back to straight-line distance, and
    ``fallback`` when the matrix attempt was abandoned for the whole operation.
    """

    places: list[Place]
    filtered_out_count: int
    api_calls: int
    threshold: int
    mode: TravelMode
    status: ResolutionStatus = ResolutionStatus.OK
    fallback_reason: Optional[str] = None
    fallback_cause: Optional[str] = None
    partial_fallback_count: int = 0

    @property
    def fallback(self) -> bool:
        return self.status is ResolutionStatus.FALLBACK

    @property
    def partial_fallback(self) -> bool:
        return self.status is ResolutionStatus.PARTIAL

    def to_dict(self) -> dict[str, Any]:
        from ..places.formatter import place_to_dict

        payload: dict[str, Any] = {
            "success": True,
            "status": self.status.value,
            "places": [place_to_dict(place) for place in self.places],
            "filteredOutCount": self.filtered_out_count,
            "meta": {
                "apiCalls": self.api_calls,
                "threshold": self.threshold,
                "mode": self.mode.value,
            },
        }
        if self.fallback:
            payload["fallback"] = True
            payload["fallbackReason"] = self.fallback_reason
            payload["fallbackCause"] = self.fallback_cause
        if self.partial_fallback:
            payload["partialFallback"] = True
            payload["partialFallbackCount"] = self.partial_fallback_count
        return payload

"""Distance filter request schema."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import TravelMode
from .common import CoordinateModel, RawPlaceModel


class DistanceFilterRequest(BaseModel):
    origin: CoordinateModel
    places: List[RawPlaceModel] = Field(default_factory=list)
    threshold: int = Field(..., gt=0, description="Maximum travel distance in metres.")
    mode: Optional[TravelMode] = Field(
        default=None,
        description="Overrides the walking/driving choice derived from the threshold.",
    )
    deduplicate: bool = True

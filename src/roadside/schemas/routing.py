"""Route segmentation and planning request schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Provider, TravelMode
from .common import CoordinateModel


class SegmentRequest(BaseModel):
    start: CoordinateModel
    end: CoordinateModel
    interval: Optional[int] = Field(None, gt=0, description="Straight-line sample spacing in metres.")
    search_radius: Optional[int] = Field(None, gt=0)
    polyline: Optional[str] = Field(
        default=None,
        description="Google encoded polyline. When given, samples follow the route instead of a straight line.",
    )
    points: Optional[List[CoordinateModel]] = Field(
        default=None,
        description="Explicit route vertices; an alternative to an encoded polyline.",
    )

    @model_validator(mode="after")
    def _one_geometry(self) -> "SegmentRequest":
        if self.polyline and self.points:
            raise ValueError("Provide either polyline or points, not both.")
        return self


class RoutePlanRequest(BaseModel):
    origin: CoordinateModel
    destination: CoordinateModel
    provider: Provider = Provider.KAKAO
    mode: TravelMode = TravelMode.DRIVING
    priority: Literal["RECOMMEND", "TIME", "DISTANCE"] = "RECOMMEND"
    search_radius: Optional[int] = Field(None, gt=0)
    query: Optional[str] = Field(default=None, description="Keyword passed through to each search plan.")
    category_group_code: Optional[str] = None

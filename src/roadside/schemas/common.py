"""Shared request fragments."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from ..models.domain import Point, Provider


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_point(self) -> Point:
        return Point(lat=self.lat, lng=self.lng)


class RawPlaceModel(BaseModel):
    """Upstream place record tagged with its provider."""
    provider: Provider = Provider.KAKAO
    payload: Dict[str, Any] = Field(default_factory=dict)

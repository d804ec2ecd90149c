"""Place normalization request schema."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import RawPlaceModel


class NormalizeRequest(BaseModel):
    records: List[RawPlaceModel] = Field(default_factory=list)
    deduplicate: bool = True
    sort_by: Literal["distance", "relevance"] = "relevance"
    category_code: Optional[str] = None
    max_distance: Optional[int] = Field(None, gt=0)
    keyword: Optional[str] = None
    display: bool = Field(default=False, description="Return ranked display rows instead of canonical places.")
    max_results: int = Field(10, ge=1, le=100)
    embed_photos: bool = Field(default=False, description="Inline photo thumbnails as data URIs.")
    strip_api_keys: bool = True

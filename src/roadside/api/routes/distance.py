"""Distance filter endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import ConfigError
from ...schemas.distance import DistanceFilterRequest
from ...services.distance.service import filter_places_by_distance

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distance", tags=["distance"])


@router.post("/filter", status_code=status.HTTP_200_OK)
def filter_by_distance(payload: DistanceFilterRequest) -> dict:
    """Keep places within ``threshold`` metres of travel from ``origin``, nearest first."""
    try:
        return filter_places_by_distance(payload)
    except ConfigError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

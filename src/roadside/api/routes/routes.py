"""Route segmentation and search-planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import ConfigError
from ...schemas.routing import RoutePlanRequest, SegmentRequest
from ...services.routing.service import plan_route_search, segment_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/segments", status_code=status.HTTP_200_OK)
def segments(payload: SegmentRequest) -> dict:
    try:
        return segment_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/plan", status_code=status.HTTP_200_OK)
def plan(payload: RoutePlanRequest) -> dict:
    try:
        return plan_route_search(payload)
    except ConfigError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error planning route search: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to plan route search: {str(exc)}"
        ) from exc

"""Route segmentation and search-planning orchestration."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...errors import DistanceServiceError
from ...models.domain import Provider, RouteGeometry
from ...schemas.routing import RoutePlanRequest, SegmentRequest
from ..polyline import decode_polyline
from .directions import DirectionsResult, GoogleRoutesClient, KakaoDirectionsClient
from .segmenter import (
    SegmentationResult,
    SegmentOptions,
    build_search_plans,
    segment_route,
    segment_route_by_polyline,
)

logger = logging.getLogger(__name__)


def _request_geometry(payload: SegmentRequest) -> Optional[RouteGeometry]:
    if payload.polyline:
        return RouteGeometry.from_points(decode_polyline(payload.polyline))
    if payload.points:
        return RouteGeometry.from_points([point.to_point() for point in payload.points])
    return None


def segment_request(payload: SegmentRequest) -> dict[str, Any]:
    """Sample a route supplied in the request, or the straight line if none is."""
    geometry = _request_geometry(payload)
    if geometry is None:
        base = SegmentOptions.from_settings()
        options = SegmentOptions(
            interval=payload.interval or base.interval,
            search_radius=payload.search_radius or base.search_radius,
        )
        result = segment_route(payload.start.to_point(), payload.end.to_point(), options)
        mode = "straight"
    else:
        result = segment_route_by_polyline(geometry, SegmentOptions.for_polyline(payload.search_radius))
        mode = "polyline"
    logger.info(f"Segmented {mode} route: {result.total_distance} m into {len(result.samples)} samples")
    return {"success": True, "mode": mode, **result.to_dict()}


def _directions_client(provider: Provider):
    if provider is Provider.GOOGLE:
        return GoogleRoutesClient()
    return KakaoDirectionsClient()


def _fetch_directions(payload: RoutePlanRequest, client) -> DirectionsResult:
    origin, destination = payload.origin.to_point(), payload.destination.to_point()
    if payload.provider is Provider.KAKAO:
        return client.compute_route(origin, destination, priority=payload.priority)
    return client.compute_route(origin, destination, mode=payload.mode)


def plan_route_search(payload: RoutePlanRequest, client=None) -> dict[str, Any]:
    """Fetch a real route, sample it and emit one keyword-search plan per sample.

    A directions failure degrades to straight-line sampling and sets
    ``fallback``. A missing credential raises ``ConfigError`` from the client.
    """
    client = client or _directions_client(payload.provider)
    origin, destination = payload.origin.to_point(), payload.destination.to_point()

    directions: Optional[DirectionsResult] = None
    fallback_reason: Optional[str] = None
    try:
        directions = _fetch_directions(payload, client)
    except DistanceServiceError as exc:
        fallback_reason = str(exc)
        logger.warning(f"Directions unavailable ({type(exc).__name__}: {exc}); sampling the straight line instead")

    result: SegmentationResult
    if directions is not None:
        result = segment_route_by_polyline(directions.geometry, SegmentOptions.for_polyline(payload.search_radius))
    else:
        base = SegmentOptions.from_settings()
        result = segment_route(
            origin,
            destination,
            SegmentOptions(interval=base.interval, search_radius=payload.search_radius or base.search_radius),
        )

    search_params: dict[str, Any] = {}
    if payload.query:
        search_params["query"] = payload.query
    if payload.category_group_code:
        search_params["category_group_code"] = payload.category_group_code

    response: dict[str, Any] = {
        "success": True,
        "provider": payload.provider.value,
        "fallback": directions is None,
        **result.to_dict(),
        "plans": build_search_plans(result, **search_params),
    }
    if directions is not None:
        response["routeDistance"] = directions.distance_meters
        response["routeDuration"] = directions.duration_seconds
        response["routePoints"] = len(directions.geometry)
    else:
        response["fallbackReason"] = fallback_reason
    return response

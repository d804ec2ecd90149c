"""Directions providers that supply route geometry for the polyline sampler."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ...config import is_usable_key, settings
from ...errors import ConfigError, UpstreamStatusError
from ...models.domain import Point, Provider, RouteGeometry, TravelMode
from ..http import ServiceClient
from ..polyline import decode_polyline, decode_vertex_sections

logger = logging.getLogger(__name__)

GOOGLE_TRAVEL_MODES = {TravelMode.DRIVING: "DRIVE", TravelMode.WALKING: "WALK"}
GOOGLE_FIELD_MASK = "routes.distanceMeters,routes.duration,routes.polyline.encodedPolyline"
KAKAO_PRIORITIES = ("RECOMMEND", "TIME", "DISTANCE")


@dataclass(frozen=True, slots=True)
class DirectionsResult:
    provider: Provider
    geometry: RouteGeometry
    distance_meters: Optional[int]
    duration_seconds: Optional[int]


def _parse_google_duration(value: Any) -> Optional[int]:
    # Routes API reports durations as "1234s".
    if value is None:
        return None
    text = str(value).strip().rstrip("s")
    try:
        return int(float(text))
    except ValueError:
        return None


def _geometry(points: list[Point], provider: Provider) -> RouteGeometry:
    if len(points) < 2:
        raise UpstreamStatusError("EMPTY_GEOMETRY", f"{provider.value} route has {len(points)} points")
    return RouteGeometry.from_points(points)


class GoogleRoutesClient(ServiceClient):
    """Google Routes API ``computeRoutes`` with an encoded-polyline field mask."""

    service_name = "Google Routes"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        key = api_key if api_key is not None else settings.require_google_api_key()
        if not is_usable_key(key):
            raise ConfigError("Google Routes API key is empty or a placeholder.")
        super().__init__(timeout=timeout, max_retries=max_retries, backoff_seconds=backoff_seconds, transport=transport)
        self.api_key = key.strip()
        self.base_url = base_url or settings.google_routes_url

    def compute_route(self, origin: Point, destination: Point, mode: TravelMode = TravelMode.DRIVING) -> DirectionsResult:
        body = {
            "origin": {"location": {"latLng": {"latitude": origin.lat, "longitude": origin.lng}}},
            "destination": {"location": {"latLng": {"latitude": destination.lat, "longitude": destination.lng}}},
            "travelMode": GOOGLE_TRAVEL_MODES[TravelMode(mode)],
            "polylineEncoding": "ENCODED_POLYLINE",
        }
        headers = {"X-Goog-Api-Key": self.api_key, "X-Goog-FieldMask": GOOGLE_FIELD_MASK}
        data = self._request_json("POST", self.base_url, json=body, headers=headers)

        routes = data.get("routes") or [] if isinstance(data, dict) else []
        if not routes:
            raise UpstreamStatusError("NO_ROUTES", "No routes found between the specified origin and destination")
        route = routes[0]
        encoded = (route.get("polyline") or {}).get("encodedPolyline") or ""
        try:
            points = decode_polyline(encoded)
        except ValueError as e:
            raise UpstreamStatusError("INVALID_POLYLINE", str(e)) from e

        distance = route.get("distanceMeters")
        result = DirectionsResult(
            provider=Provider.GOOGLE,
            geometry=_geometry(points, Provider.GOOGLE),
            distance_meters=int(distance) if distance is not None else None,
            duration_seconds=_parse_google_duration(route.get("duration")),
        )
        logger.info(f"Google route: {len(result.geometry)} points, {result.distance_meters} m")
        return result


class KakaoDirectionsClient(ServiceClient):
    """Kakao Mobility car directions; geometry arrives as flat vertex arrays."""

    service_name = "Kakao Mobility"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        key = api_key if api_key is not None else settings.require_kakao_api_key()
        if not is_usable_key(key):
            raise ConfigError("Kakao REST API key is empty or a placeholder.")
        super().__init__(timeout=timeout, max_retries=max_retries, backoff_seconds=backoff_seconds, transport=transport)
        self.api_key = key.strip()
        self.base_url = base_url or settings.kakao_directions_url

    def compute_route(
        self,
        origin: Point,
        destination: Point,
        priority: str = "RECOMMEND",
        avoid: str | None = None,
    ) -> DirectionsResult:
        if priority not in KAKAO_PRIORITIES:
            raise ValueError(f"priority must be one of {', '.join(KAKAO_PRIORITIES)}.")
        params = {
            # Kakao takes "x,y", i.e. lng first.
            "origin": f"{origin.lng},{origin.lat}",
            "destination": f"{destination.lng},{destination.lat}",
            "priority": priority,
        }
        if avoid:
            params["avoid"] = avoid
        headers = {"Authorization": f"KakaoAK {self.api_key}"}
        data = self._request_json("GET", self.base_url, params=params, headers=headers)

        routes = data.get("routes") or [] if isinstance(data, dict) else []
        if not routes:
            raise UpstreamStatusError("NO_ROUTES", "No routes found between the specified origin and destination")
        route = routes[0]
        result_code = route.get("result_code")
        if result_code != 0:
            raise UpstreamStatusError(f"ROUTE_ERROR_{result_code}", route.get("result_msg"))

        summary = route.get("summary") or {}
        points = decode_vertex_sections(route.get("sections") or [])
        result = DirectionsResult(
            provider=Provider.KAKAO,
            geometry=_geometry(points, Provider.KAKAO),
            distance_meters=summary.get("distance"),
            duration_seconds=summary.get("duration"),
        )
        logger.info(f"Kakao route: {len(result.geometry)} points, {result.distance_meters} m")
        return result

"""HTTP client for the Google Distance Matrix service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import httpx

from ...config import is_usable_key, settings
from ...errors import ConfigError, UpstreamStatusError
from ...models.domain import Point, TravelMode
from ..http import ServiceClient

# Google rejects more than 25 destinations per origin in one request.
MAX_DESTINATIONS_PER_REQUEST = 25

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatrixElement:
    """One cell of the origin row; ``status`` is the element-level status string."""

    status: str
    distance_meters: int | None = None
    duration_seconds: int | None = None

    @property
    def resolved(self) -> bool:
        return self.status == "OK" and self.distance_meters is not None


def _format_point(point: Point) -> str:
    return f"{point.lat},{point.lng}"


class DistanceMatrixClient(ServiceClient):
    service_name = "Distance Matrix"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        language: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        key = api_key if api_key is not None else settings.require_google_api_key()
        if not is_usable_key(key):
            raise ConfigError("Distance Matrix API key is empty or a placeholder.")
        super().__init__(timeout=timeout, max_retries=max_retries, backoff_seconds=backoff_seconds, transport=transport)
        self.api_key = key.strip()
        self.base_url = base_url or settings.distance_matrix_url
        self.language = language or settings.matrix_language

    def _params(self, origin: Point, destinations: Sequence[Point], mode: TravelMode) -> dict[str, str]:
        return {
            "origins": _format_point(origin),
            "destinations": "|".join(_format_point(point) for point in destinations),
            "mode": TravelMode(mode).value,
            "language": self.language,
            "key": self.api_key,
        }

    def fetch_row(self, origin: Point, destinations: Sequence[Point], mode: TravelMode) -> list[MatrixElement]:
        """Request one origin row against up to 25 destinations.

        Returns one ``MatrixElement`` per destination, in request order. Raises
        ``NetworkError`` or ``UpstreamStatusError`` when the request as a whole
        fails, including a top-level ``ZERO_RESULTS``.
        """
        if not destinations:
            return []
        if len(destinations) > MAX_DESTINATIONS_PER_REQUEST:
            raise ValueError(
                f"At most {MAX_DESTINATIONS_PER_REQUEST} destinations per request, got {len(destinations)}."
            )

        logger.debug(f"Distance Matrix request for {len(destinations)} destinations (mode={TravelMode(mode).value})")
        data = self._request_json("GET", self.base_url, params=self._params(origin, destinations, mode))
        if not isinstance(data, dict):
            raise UpstreamStatusError("INVALID_RESPONSE", "Distance Matrix response is not an object")

        status = data.get("status")
        if status != "OK":
            raise UpstreamStatusError(str(status or "UNKNOWN"), data.get("error_message"))

        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise UpstreamStatusError("INVALID_RESPONSE", "Distance Matrix rows are not a list")
        if not rows:
            raise UpstreamStatusError("NO_ROWS", "Distance Matrix returned no rows")

        first_row = rows[0]
        if not isinstance(first_row, dict):
            raise UpstreamStatusError("INVALID_RESPONSE", "Distance Matrix row is not an object")
        raw_elements = first_row.get("elements") or []
        if not isinstance(raw_elements, list):
            raise UpstreamStatusError("INVALID_RESPONSE", "Distance Matrix elements are not a list")

        elements: list[MatrixElement] = []
        for index in range(len(destinations)):
            raw = raw_elements[index] if index < len(raw_elements) else {"status": "MISSING"}
            elements.append(_parse_element(raw))
        return elements


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_element(raw: Any) -> MatrixElement:
    if not isinstance(raw, dict):
        return MatrixElement(status="INVALID_ELEMENT")
    status = str(raw.get("status") or "UNKNOWN")
    if status != "OK":
        return MatrixElement(status=status)
    distance_raw = raw.get("distance")
    distance = _optional_int(distance_raw.get("value")) if isinstance(distance_raw, dict) else None
    if distance is None:
        return MatrixElement(status="MISSING_DISTANCE")
    duration = raw.get("duration")
    duration_seconds = _optional_int(duration.get("value")) if isinstance(duration, dict) else None
    return MatrixElement(status=status, distance_meters=distance, duration_seconds=duration_seconds)

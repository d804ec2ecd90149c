"""Kakao Local geocoding: addresses and landmarks to coordinates and back."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from ..config import is_usable_key, settings
from ..errors import ConfigError
from ..models.domain import Point
from .http import ServiceClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeocodeMatch:
    point: Point
    address: str
    match_type: str
    place_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {**self.point.to_xy(), "address": self.address, "type": self.match_type}
        if self.place_name:
            payload["placeName"] = self.place_name
        return payload


@dataclass(frozen=True, slots=True)
class ReverseGeocodeMatch:
    address: Optional[str]
    road_address: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "roadAddress": self.road_address}


class KakaoGeocoder(ServiceClient):
    service_name = "Kakao Local"

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
        self.base_url = (base_url or settings.kakao_local_base_url).rstrip("/")

    def _documents(self, endpoint: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        data = self._request_json(
            "GET",
            f"{self.base_url}{endpoint}",
            params={key: value for key, value in params.items() if value is not None},
            headers={"Authorization": f"KakaoAK {self.api_key}"},
        )
        if not isinstance(data, dict):
            return []
        return list(data.get("documents") or [])

    def address_to_coord(self, address: str) -> Optional[GeocodeMatch]:
        """Address search first; landmark names such as "강남역" fall back to keyword search."""
        documents = self._documents("/search/address.json", {"query": address})
        if documents:
            doc = documents[0]
            return GeocodeMatch(
                point=Point.from_xy(doc["x"], doc["y"]),
                address=doc.get("address_name") or address,
                match_type="address",
            )

        documents = self._documents("/search/keyword.json", {"query": address, "size": 1})
        if documents:
            doc = documents[0]
            return GeocodeMatch(
                point=Point.from_xy(doc["x"], doc["y"]),
                address=doc.get("address_name") or address,
                match_type="landmark",
                place_name=doc.get("place_name"),
            )

        logger.info(f"No geocoding result for {address!r}")
        return None

    def coord_to_address(self, point: Point) -> Optional[ReverseGeocodeMatch]:
        documents = self._documents("/geo/coord2address.json", point.to_xy())
        if not documents:
            return None
        doc = documents[0]
        return ReverseGeocodeMatch(
            address=(doc.get("address") or {}).get("address_name"),
            road_address=(doc.get("road_address") or {}).get("address_name"),
        )

    def batch_address_to_coord(self, addresses: Sequence[str], max_workers: int = 4) -> list[Optional[GeocodeMatch]]:
        """Geocode several addresses in parallel; results keep input order."""
        if not addresses:
            return []
        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(addresses)))) as executor:
            return list(executor.map(self.address_to_coord, addresses))

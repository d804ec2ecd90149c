"""Serialise canonical places for API responses and page embedding."""

from __future__ import annotations

from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ...models.domain import Place


def place_to_dict(place: Place) -> dict[str, Any]:
    """Canonical camelCase output. Optional keys are omitted, never null."""
    payload: dict[str, Any] = {
        "id": place.id,
        "provider": place.provider.value,
        "displayName": place.display_name,
        "formattedAddress": place.formatted_address,
        "roadAddress": place.road_address,
        "location": {"lat": place.lat, "lng": place.lng},
        "categoryCode": place.category_code,
        "categoryName": place.category_name,
        "categoryGroupName": place.category_group_name,
        "detailCategory": place.detail_category,
        "phone": place.phone,
        "placeUrl": place.place_url,
        "distance": place.distance,
    }
    if place.travel is not None:
        payload["travelDistance"] = place.travel.distance_meters
        if place.travel.duration_seconds is not None:
            payload["travelDuration"] = place.travel.duration_seconds
        payload["travelMode"] = place.travel.mode.value
    if place.open_now is not None:
        payload["openNow"] = place.open_now
    if place.rating is not None:
        payload["rating"] = place.rating
    if place.review_count is not None:
        payload["reviewCount"] = place.review_count
    if place.photo_url:
        payload["photoUrl"] = place.photo_url
    return payload


def _context_fields(place: Place) -> dict[str, Any]:
    context = place.context
    out: dict[str, Any] = {}
    if context.tags:
        out["tags"] = list(context.tags)
    if context.suitability:
        out["suitability"] = list(context.suitability)
    if context.price_hint:
        out["priceHint"] = context.price_hint
    if context.time_match:
        out["timeMatch"] = context.time_match
    if context.route_segment:
        out["routeSegment"] = context.route_segment
    if context.distance_from_start is not None:
        out["distanceFromStart"] = context.distance_from_start
    if context.area_group:
        out["areaGroup"] = context.area_group
    if context.day_group is not None:
        out["dayGroup"] = context.day_group
    if context.trip_role:
        out["tripRole"] = context.trip_role
    if context.disclaimer:
        out["disclaimer"] = context.disclaimer
    return out


def format_places_for_display(
    places: Sequence[Place], max_results: int = 10, include_raw: bool = False
) -> list[dict[str, Any]]:
    """Ranked display rows: the first ``max_results`` places in their given order."""
    rows = []
    for rank, place in enumerate(places[:max_results], start=1):
        row: dict[str, Any] = {
            "rank": rank,
            "name": place.display_name,
            "address": place.road_address or place.formatted_address,
            "category": place.detail_category or place.category_group_name,
            "phone": place.phone or None,
            "distance": f"{place.distance}m" if place.distance else None,
            "url": place.place_url,
            "provider": place.provider.value,
            "coordinates": {"lat": place.lat, "lng": place.lng},
        }
        if place.open_now is not None:
            row["openNow"] = place.open_now
        if place.rating is not None:
            row["rating"] = place.rating
        if place.review_count is not None:
            row["reviewCount"] = place.review_count
        if place.photo_url:
            row["photoUrl"] = place.photo_url
        row.update(_context_fields(place))
        if include_raw:
            row["_raw"] = place.raw
        rows.append(row)
    return rows


def strip_api_key(url: str | None) -> str | None:
    if not url or url.startswith("data:"):
        return url
    parts = urlsplit(url)
    query = [(name, value) for name, value in parse_qsl(parts.query, keep_blank_values=True) if name != "key"]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def strip_api_keys(places: Sequence[Place]) -> list[Place]:
    """Copies of ``places`` whose photo URLs no longer carry a ``key=`` parameter."""
    return [
        place.evolve(photo_url=strip_api_key(place.photo_url)) if place.photo_url and "key=" in place.photo_url else place
        for place in places
    ]

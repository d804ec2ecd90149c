"""Deduplication, ordering and filtering of canonical places."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from ...models.domain import Place

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 6

DedupKey = tuple[str, str]


@dataclass(slots=True)
class DedupResult:
    places: list[Place] = field(default_factory=list)
    removed_count: int = 0


def canonical_url(url: str) -> str:
    """Lower-case scheme and host, prefer https, drop fragment and trailing slash."""
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if scheme == "http":
        scheme = "https"
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, parts.netloc.lower(), path, parts.query, ""))


def dedup_key(place: Place) -> Optional[DedupKey]:
    """Identity of a place: canonical URL, then provider id, then rounded coordinates.

    Returns ``None`` when the place has none of the three; such places are never
    merged with anything.
    """
    if place.place_url:
        return ("url", canonical_url(place.place_url))
    if place.id:
        return ("id", f"{place.provider.value}:{place.id}")
    if place.location is not None:
        lat = round(place.location.lat, COORDINATE_PRECISION)
        lng = round(place.location.lng, COORDINATE_PRECISION)
        return ("coord", f"{lat:.{COORDINATE_PRECISION}f},{lng:.{COORDINATE_PRECISION}f}")
    return None


def deduplicate_places(places: Iterable[Place]) -> DedupResult:
    """Stable dedup: the first occurrence of each key wins."""
    seen: set[DedupKey] = set()
    result = DedupResult()
    for place in places:
        key = dedup_key(place)
        if key is not None:
            if key in seen:
                result.removed_count += 1
                continue
            seen.add(key)
        result.places.append(place)
    if result.removed_count:
        logger.info(f"Removed {result.removed_count} duplicate places")
    return result


def _distance_key(place: Place) -> float:
    if place.travel is not None:
        return float(place.travel.distance_meters)
    if place.distance is not None:
        return float(place.distance)
    return math.inf


def sort_places(places: Sequence[Place], by: Literal["distance", "relevance"] = "distance") -> list[Place]:
    """Return a new list; ``relevance`` keeps upstream order."""
    if by == "distance":
        return sorted(places, key=_distance_key)
    if by == "relevance":
        return list(places)
    raise ValueError(f"Unknown sort order: {by}")


def filter_places(
    places: Sequence[Place],
    category_code: str | None = None,
    max_distance: int | None = None,
    keyword: str | None = None,
) -> list[Place]:
    needle = keyword.lower() if keyword else None
    kept = []
    for place in places:
        if category_code and place.category_code != category_code:
            continue
        if max_distance is not None and place.distance is not None and place.distance > max_distance:
            continue
        if needle and needle not in place.display_name.lower() and needle not in place.category_name.lower():
            continue
        kept.append(place)
    return kept

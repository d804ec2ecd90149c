"""Normalize, deduplicate, filter and format raw place records."""

from __future__ import annotations

import logging
from typing import Any

from ...schemas.places import NormalizeRequest
from .dedup import deduplicate_places, filter_places, sort_places
from .formatter import format_places_for_display, place_to_dict, strip_api_keys
from .normalizer import PlaceNormalizer, RawPlaceRecord
from .photos import PhotoFetcher, embed_photos

logger = logging.getLogger(__name__)


def normalize_places(
    payload: NormalizeRequest,
    normalizer: PlaceNormalizer | None = None,
    fetcher: PhotoFetcher | None = None,
) -> dict[str, Any]:
    normalizer = normalizer or PlaceNormalizer.from_settings()
    places = normalizer.normalize_records(
        RawPlaceRecord(provider=record.provider, payload=record.payload) for record in payload.records
    )
    total = len(places)

    removed = 0
    if payload.deduplicate:
        deduped = deduplicate_places(places)
        places, removed = deduped.places, deduped.removed_count

    places = filter_places(
        places,
        category_code=payload.category_code,
        max_distance=payload.max_distance,
        keyword=payload.keyword,
    )
    places = sort_places(places, by=payload.sort_by)
    # Downloads need the key, so embed before stripping it.
    if payload.embed_photos:
        places = embed_photos(places, fetcher=fetcher)
    if payload.strip_api_keys:
        places = strip_api_keys(places)

    logger.info(f"Normalized {total} records into {len(places)} places ({removed} duplicates removed)")
    rendered = (
        format_places_for_display(places, max_results=payload.max_results)
        if payload.display
        else [place_to_dict(place) for place in places]
    )
    return {
        "success": True,
        "places": rendered,
        "totalCount": len(places),
        "meta": {"inputCount": total, "duplicatesRemoved": removed},
    }

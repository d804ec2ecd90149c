"""Distance filter orchestration for the HTTP layer."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...config import settings
from ...schemas.distance import DistanceFilterRequest
from ..places.dedup import deduplicate_places
from ..places.normalizer import PlaceNormalizer, RawPlaceRecord
from .matrix_client import DistanceMatrixClient
from .models import ResolverConfig
from .resolver import DistanceResolver

logger = logging.getLogger(__name__)


def build_resolver() -> DistanceResolver:
    # Without a Google key every call reports a straight-line fallback.
    client: Optional[DistanceMatrixClient] = DistanceMatrixClient() if settings.has_google_api_key else None
    return DistanceResolver(client, ResolverConfig.from_settings())


def filter_places_by_distance(payload: DistanceFilterRequest, resolver: DistanceResolver | None = None) -> dict[str, Any]:
    resolver = resolver or build_resolver()
    normalizer = PlaceNormalizer.from_settings()
    places = normalizer.normalize_records(
        RawPlaceRecord(provider=record.provider, payload=record.payload) for record in payload.places
    )

    removed = 0
    if payload.deduplicate:
        deduped = deduplicate_places(places)
        places, removed = deduped.places, deduped.removed_count

    result = resolver.filter_by_distance(payload.origin.to_point(), places, payload.threshold, payload.mode)
    response = result.to_dict()
    response["meta"]["duplicatesRemoved"] = removed
    return response

"""Place normalization, deduplication and formatting."""

from .dedup import DedupResult, dedup_key, deduplicate_places, filter_places, sort_places
from .formatter import format_places_for_display, place_to_dict, strip_api_keys
from .normalizer import (
    PlaceNormalizer,
    RawPlaceRecord,
    attach_context,
    normalize_google_place,
    normalize_kakao_place,
    normalize_records,
)
from .photos import PhotoFetcher, embed_photos

__all__ = [
    "DedupResult",
    "PhotoFetcher",
    "PlaceNormalizer",
    "RawPlaceRecord",
    "attach_context",
    "dedup_key",
    "deduplicate_places",
    "embed_photos",
    "filter_places",
    "format_places_for_display",
    "normalize_google_place",
    "normalize_kakao_place",
    "normalize_records",
    "place_to_dict",
    "sort_places",
    "strip_api_keys",
]

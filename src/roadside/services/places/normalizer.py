"""Map raw Kakao Local and Google Places records onto the canonical Place."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode

from ...config import is_usable_key, settings
from ...models.domain import Place, PlaceContext, Point, Provider

logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = " > "

KAKAO_CATEGORY_CODES: dict[str, str] = {
    "MT1": "대형마트",
    "CS2": "편의점",
    "PS3": "어린이집/유치원",
    "SC4": "학교",
    "AC5": "학원",
    "PK6": "주차장",
    "OL7": "주유소/충전소",
    "SW8": "지하철역",
    "BK9": "은행",
    "CT1": "문화시설",
    "AG2": "중개업소",
    "PO3": "공공기관",
    "AT4": "관광명소",
    "AD5": "숙박",
    "FD6": "음식점",
    "CE7": "카페",
    "HP8": "병원",
    "PM9": "약국",
}

GOOGLE_TYPE_LABELS: dict[str, str] = {
    "restaurant": "음식점",
    "cafe": "카페",
    "bar": "술집",
    "lodging": "숙박",
    "tourist_attraction": "관광명소",
    "park": "공원",
    "hospital": "병원",
    "pharmacy": "약국",
    "convenience_store": "편의점",
    "subway_station": "지하철역",
    "shopping_mall": "쇼핑몰",
    "gym": "헬스장",
    "veterinary_care": "동물병원",
    "pet_store": "반려동물용품",
    "campground": "캠핑장",
}


@dataclass(frozen=True, slots=True)
class RawPlaceRecord:
    """An upstream record tagged with the provider that produced it."""

    provider: Provider
    payload: Mapping[str, Any]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any) -> Optional[int]:
    number = _float(value)
    return int(number) if number is not None else None


def _point(lat: Any, lng: Any) -> Optional[Point]:
    lat_value, lng_value = _float(lat), _float(lng)
    if lat_value is None or lng_value is None:
        return None
    try:
        return Point(lat=lat_value, lng=lng_value)
    except ValueError:
        logger.warning(f"Dropping out-of-range coordinate ({lat_value}, {lng_value})")
        return None


def normalize_kakao_place(raw: Mapping[str, Any] | None) -> Place:
    """Kakao Local keyword/category search document → Place.

    Kakao reports ``x`` as longitude and ``y`` as latitude, both as strings.
    It carries no rating, hours or photos; those stay ``None``.
    """
    raw = dict(raw or {})

    category_code = _text(raw.get("category_group_code") or raw.get("category_code"))
    category_name = _text(raw.get("category_name") or raw.get("category"))
    category_path = [part.strip() for part in category_name.split(CATEGORY_SEPARATOR) if part.strip()] if category_name else []

    return Place(
        id=_text(raw.get("id")) or None,
        provider=Provider.KAKAO,
        display_name=_text(raw.get("place_name")),
        formatted_address=_text(raw.get("address_name") or raw.get("address")),
        road_address=_text(raw.get("road_address_name") or raw.get("road_address")),
        location=_point(raw.get("y"), raw.get("x")),
        category_code=category_code,
        category_name=category_name,
        category_group_name=_text(raw.get("category_group_name")) or KAKAO_CATEGORY_CODES.get(category_code, ""),
        category_path=category_path,
        detail_category=category_path[-1] if category_path else "",
        phone=_text(raw.get("phone")),
        place_url=_text(raw.get("place_url")),
        distance=_int(raw.get("distance")),
        raw=raw,
    )


def google_photo_url(photo_reference: str, api_key: str | None, max_width: int | None = None) -> str:
    params = {
        "maxwidth": max_width or settings.photo_display_width,
        "photo_reference": photo_reference,
    }
    if api_key:
        params["key"] = api_key
    return f"{settings.google_photo_url}?{urlencode(params)}"


def normalize_google_place(raw: Mapping[str, Any] | None, api_key: str | None = None) -> Place:
    """Google Places (legacy Nearby/Text/Details) result → Place.

    Categories come from the ``types`` tag list; the first tag is the code and
    is translated through ``GOOGLE_TYPE_LABELS`` when known.
    """
    raw = dict(raw or {})

    place_id = _text(raw.get("place_id")) or None
    location = (raw.get("geometry") or {}).get("location") or {}
    types = [str(tag) for tag in raw.get("types") or [] if tag]
    first_type = types[0] if types else ""

    photos = raw.get("photos") or []
    photo_reference = _text(photos[0].get("photo_reference")) if photos and isinstance(photos[0], Mapping) else ""
    opening_hours = raw.get("opening_hours") or {}
    open_now = opening_hours.get("open_now") if isinstance(opening_hours, Mapping) else None

    place_url = _text(raw.get("url"))
    if not place_url and place_id:
        place_url = f"https://www.google.com/maps/place/?q=place_id:{place_id}"

    return Place(
        id=place_id,
        provider=Provider.GOOGLE,
        display_name=_text(raw.get("name")),
        formatted_address=_text(raw.get("formatted_address") or raw.get("vicinity")),
        road_address=None,
        location=_point(location.get("lat"), location.get("lng")),
        category_code=first_type,
        category_name=CATEGORY_SEPARATOR.join(types),
        category_group_name=GOOGLE_TYPE_LABELS.get(first_type, first_type),
        category_path=types,
        detail_category=types[-1] if types else "",
        phone=_text(raw.get("formatted_phone_number")),
        place_url=place_url,
        distance=None,
        open_now=open_now if isinstance(open_now, bool) else None,
        rating=_float(raw.get("rating")),
        review_count=_int(raw.get("user_ratings_total")),
        photo_reference=photo_reference or None,
        photo_url=google_photo_url(photo_reference, api_key) if photo_reference else None,
        raw=raw,
    )


class PlaceNormalizer:
    """Single dispatch point from tagged raw records to canonical places."""

    def __init__(self, google_api_key: str | None = None) -> None:
        # Photo URLs are still built without a key; they just will not load.
        self.google_api_key = google_api_key if is_usable_key(google_api_key) else None

    @classmethod
    def from_settings(cls) -> "PlaceNormalizer":
        return cls(google_api_key=settings.google_places_api_key)

    def normalize(self, record: RawPlaceRecord) -> Place:
        provider = Provider(record.provider)
        if provider is Provider.GOOGLE:
            return normalize_google_place(record.payload, api_key=self.google_api_key)
        return normalize_kakao_place(record.payload)

    def normalize_records(self, records: Iterable[RawPlaceRecord]) -> list[Place]:
        return [self.normalize(record) for record in records]

    def normalize_payloads(self, payloads: Iterable[Mapping[str, Any]], provider: Provider | str) -> list[Place]:
        tag = Provider(provider)
        return self.normalize_records(RawPlaceRecord(provider=tag, payload=payload) for payload in payloads)


def normalize_records(records: Iterable[RawPlaceRecord], google_api_key: str | None = None) -> list[Place]:
    return PlaceNormalizer(google_api_key=google_api_key).normalize_records(records)


_CONTEXT_FIELDS = frozenset(f.name for f in fields(PlaceContext))


def attach_context(place: Place, **context: Any) -> Place:
    """Return a copy of ``place`` with downstream context fields merged in.

    ``None`` values leave the existing field untouched.
    """
    unknown = set(context) - _CONTEXT_FIELDS
    if unknown:
        raise TypeError(f"Unknown context fields: {', '.join(sorted(unknown))}")
    current = place.context
    updates = {name: value for name, value in context.items() if value is not None}
    return place.evolve(context=current.copy(**updates))

from dataclasses import replace

import pytest

from roadside.models.domain import Point, Provider, TravelEstimate, TravelMode, DistanceSource
from roadside.services.places.dedup import dedup_key, deduplicate_places, filter_places, sort_places
from roadside.services.places.formatter import format_places_for_display, place_to_dict, strip_api_keys
from roadside.services.places.normalizer import (
    PlaceNormalizer,
    RawPlaceRecord,
    attach_context,
    normalize_google_place,
    normalize_kakao_place,
)


def _kakao(pid: str, name: str = "스타벅스 강남점", distance: str = "120", url: str | None = None) -> dict:
    return {
        "id": pid,
        "place_name": name,
        "category_name": "음식점 > 카페 > 커피전문점 > 스타벅스",
        "category_group_code": "CE7",
        "category_group_name": "",
        "phone": "02-000-0000",
        "address_name": "서울 강남구 역삼동 825",
        "road_address_name": "서울 강남구 강남대로 390",
        "x": "127.028",
        "y": "37.498",
        "place_url": url if url is not None else f"http://place.map.kakao.com/{pid}",
        "distance": distance,
    }


def _google(pid: str = "ChIJ123") -> dict:
    return {
        "place_id": pid,
        "name": "Cafe Onion",
        "formatted_address": "서울 성동구 아차산로9길 8",
        "geometry": {"location": {"lat": 37.5447, "lng": 127.0582}},
        "types": ["cafe", "food", "point_of_interest"],
        "rating": 4.4,
        "user_ratings_total": 5123,
        "opening_hours": {"open_now": True},
        "photos": [{"photo_reference": "ref-abc"}],
    }


def test_normalize_kakao_place_maps_fields():
    place = normalize_kakao_place(_kakao("26338954"))

    assert place.provider is Provider.KAKAO
    assert place.id == "26338954"
    assert place.location == Point(lat=37.498, lng=127.028)
    assert place.category_path == ["음식점", "카페", "커피전문점", "스타벅스"]
    assert place.detail_category == "스타벅스"
    assert place.category_group_name == "카페"
    assert place.distance == 120
    assert place.rating is None and place.photo_url is None


def test_normalize_kakao_place_tolerates_empty_record():
    place = normalize_kakao_place({})

    assert place.id is None
    assert place.location is None
    assert place.category_path == []
    assert place.distance is None


def test_normalize_google_place_uses_type_labels_and_builds_photo_url():
    place = normalize_google_place(_google(), api_key="AIzaTestKey")

    assert place.provider is Provider.GOOGLE
    assert place.category_code == "cafe"
    assert place.category_group_name == "카페"
    assert place.detail_category == "point_of_interest"
    assert place.open_now is True
    assert place.rating == 4.4
    assert place.review_count == 5123
    assert place.photo_reference == "ref-abc"
    assert "photo_reference=ref-abc" in place.photo_url
    assert "key=AIzaTestKey" in place.photo_url
    assert place.place_url.endswith("place_id:ChIJ123")


def test_normalize_google_place_unknown_type_falls_back_to_raw_tag():
    raw = _google()
    raw["types"] = ["bakery"]

    assert normalize_google_place(raw).category_group_name == "bakery"


def test_normalizer_dispatches_on_provider_tag():
    normalizer = PlaceNormalizer(google_api_key="changeme")
    places = normalizer.normalize_records(
        [RawPlaceRecord(Provider.KAKAO, _kakao("1")), RawPlaceRecord(Provider.GOOGLE, _google())]
    )

    assert [p.provider for p in places] == [Provider.KAKAO, Provider.GOOGLE]
    # Placeholder keys never reach the photo URL.
    assert "key=" not in places[1].photo_url


def test_dedup_prefers_url_then_id_then_coordinates():
    place = normalize_kakao_place(_kakao("1", url="HTTP://Place.Map.Kakao.com/1/"))
    assert dedup_key(place) == ("url", "https://place.map.kakao.com/1")

    no_url = replace(place, place_url="")
    assert dedup_key(no_url) == ("id", "kakao:1")

    anonymous = replace(no_url, id=None)
    assert dedup_key(anonymous) == ("coord", "37.498000,127.028000")


def test_deduplicate_is_stable_and_idempotent():
    places = [
        normalize_kakao_place(_kakao("1", name="first")),
        normalize_kakao_place(_kakao("2")),
        normalize_kakao_place(_kakao("1", name="second")),
    ]

    once = deduplicate_places(places)
    twice = deduplicate_places(once.places)

    assert [p.display_name for p in once.places] == ["first", "스타벅스 강남점"]
    assert once.removed_count == 1
    assert twice.places == once.places
    assert twice.removed_count == 0


def test_sort_places_by_distance_and_relevance():
    near = normalize_kakao_place(_kakao("near", distance="50"))
    far = normalize_kakao_place(_kakao("far", distance="900"))
    unknown = normalize_kakao_place(_kakao("unknown", distance=""))
    travelled = replace(
        far,
        travel=TravelEstimate(distance_meters=10, duration_seconds=None, mode=TravelMode.WALKING, source=DistanceSource.HAVERSINE),
    )

    assert [p.id for p in sort_places([unknown, far, near])] == ["near", "far", "unknown"]
    assert [p.id for p in sort_places([near, travelled])] == ["far", "near"]
    assert [p.id for p in sort_places([unknown, far, near], by="relevance")] == ["unknown", "far", "near"]
    with pytest.raises(ValueError):
        sort_places([near], by="rating")


def test_filter_places_by_category_distance_and_keyword():
    cafe = normalize_kakao_place(_kakao("1", name="Blue Bottle", distance="300"))
    far_cafe = normalize_kakao_place(_kakao("2", name="Far Cafe", distance="3000"))
    food = replace(normalize_kakao_place(_kakao("3", name="국밥집")), category_code="FD6", category_name="음식점 > 한식")

    assert filter_places([cafe, far_cafe, food], category_code="CE7") == [cafe, far_cafe]
    assert filter_places([cafe, far_cafe, food], max_distance=1000) == [cafe, food]
    assert filter_places([cafe, far_cafe, food], keyword="blue") == [cafe]
    assert filter_places([cafe, far_cafe, food], keyword="한식") == [food]


def test_place_to_dict_omits_absent_optionals():
    payload = place_to_dict(normalize_kakao_place(_kakao("1")))

    assert payload["displayName"] == "스타벅스 강남점"
    assert payload["location"] == {"lat": 37.498, "lng": 127.028}
    for key in ("travelDistance", "travelDuration", "travelMode", "rating", "reviewCount", "photoUrl"):
        assert key not in payload


def test_format_places_for_display_ranks_and_includes_context():
    places = [normalize_kakao_place(_kakao(str(i))) for i in range(12)]
    places[0] = attach_context(places[0], tags=["뷰맛집"], day_group=1, route_segment="segment_1")

    rows = format_places_for_display(places, max_results=10)

    assert len(rows) == 10
    assert rows[0]["rank"] == 1
    assert rows[0]["address"] == "서울 강남구 강남대로 390"
    assert rows[0]["distance"] == "120m"
    assert rows[0]["tags"] == ["뷰맛집"]
    assert rows[0]["dayGroup"] == 1
    assert "tags" not in rows[1]
    assert "_raw" not in rows[0]


def test_attach_context_returns_copy_and_rejects_unknown_fields():
    place = normalize_kakao_place(_kakao("1"))
    tagged = attach_context(place, trip_role="lunch")

    assert tagged.context.trip_role == "lunch"
    assert place.context.trip_role is None
    with pytest.raises(TypeError):
        attach_context(place, mood="happy")


def test_attach_context_copy_owns_its_containers():
    place = normalize_kakao_place(_kakao("1"))
    tagged = attach_context(place, trip_role="lunch")

    tagged.context.tags.append("quiet")
    tagged.raw["place_name"] = "changed"
    tagged.category_path.append("extra")

    assert place.context.tags == []
    assert place.raw["place_name"] != "changed"
    assert "extra" not in place.category_path


def test_strip_api_keys_removes_key_parameter_only():
    place = normalize_google_place(_google(), api_key="AIzaSecret")

    stripped = strip_api_keys([place])[0]

    assert "AIzaSecret" not in stripped.photo_url
    assert "photo_reference=ref-abc" in stripped.photo_url
    assert "AIzaSecret" in place.photo_url

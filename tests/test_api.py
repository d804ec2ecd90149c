import pytest
from fastapi.testclient import TestClient

from roadside.api.routes import geocode as geocode_routes
from roadside.errors import ConfigError
from roadside.main import create_app
from roadside.models.domain import Point
from roadside.services.distance import service as distance_service
from roadside.services.distance.resolver import DistanceResolver
from roadside.services.geocoding import GeocodeMatch
from roadside.services.routing import service as routing_service


def _kakao(pid: str, lat: str, lng: str) -> dict:
    return {
        "id": pid,
        "place_name": f"place {pid}",
        "category_name": "음식점 > 카페",
        "category_group_code": "CE7",
        "x": lng,
        "y": lat,
        "place_url": f"http://place.map.kakao.com/{pid}",
    }


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health(client: TestClient):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert set(body["providers"]) == {"google", "kakao"}


def test_segments_straight_line(client: TestClient):
    response = client.post(
        "/api/routes/segments",
        json={"start": {"lat": 37.0, "lng": 127.0}, "end": {"lat": 37.2, "lng": 127.0}, "interval": 5000},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "straight"
    assert body["segments"][0]["label"] == "start"
    assert body["numSegments"] == len(body["segments"]) - 1


def test_segments_from_encoded_polyline(client: TestClient):
    response = client.post(
        "/api/routes/segments",
        json={"start": {"lat": 38.5, "lng": -120.2}, "end": {"lat": 43.252, "lng": -126.453}, "polyline": "_p~iF~ps|U_ulLnnqC_mqNvxq`@"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "polyline"
    assert len(body["segments"]) <= 22


def test_segments_rejects_truncated_polyline(client: TestClient):
    response = client.post(
        "/api/routes/segments",
        json={"start": {"lat": 38.5, "lng": -120.2}, "end": {"lat": 40.7, "lng": -120.95}, "polyline": "_p~iF"},
    )

    assert response.status_code == 400


def test_segments_validates_coordinates(client: TestClient):
    response = client.post("/api/routes/segments", json={"start": {"lat": 95, "lng": 0}, "end": {"lat": 0, "lng": 0}})

    assert response.status_code == 422


def test_plan_without_credentials_is_service_unavailable(client: TestClient, monkeypatch):
    def _missing(provider):
        raise ConfigError("KAKAO_REST_API_KEY is not set.")

    monkeypatch.setattr(routing_service, "_directions_client", _missing)
    response = client.post(
        "/api/routes/plan",
        json={"origin": {"lat": 37.497, "lng": 127.028}, "destination": {"lat": 37.395, "lng": 127.109}},
    )

    assert response.status_code == 503


def test_distance_filter_straight_line_mode(client: TestClient, monkeypatch):
    monkeypatch.setattr(distance_service, "build_resolver", lambda: DistanceResolver(None))
    response = client.post(
        "/api/distance/filter",
        json={
            "origin": {"lat": 37.50, "lng": 127.03},
            "threshold": 2000,
            "places": [
                {"provider": "kakao", "payload": _kakao("near", "37.501", "127.031")},
                {"provider": "kakao", "payload": _kakao("far", "37.60", "127.03")},
                {"provider": "kakao", "payload": _kakao("near", "37.501", "127.031")},
            ],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["places"]] == ["near"]
    assert body["filteredOutCount"] == 1
    assert body["fallback"] is True
    assert body["fallbackCause"] == "ConfigError"
    assert body["meta"]["duplicatesRemoved"] == 1
    assert body["places"][0]["travelMode"] == "walking"


def test_places_normalize_display_rows(client: TestClient):
    response = client.post(
        "/api/places/normalize",
        json={
            "records": [
                {"provider": "kakao", "payload": _kakao("1", "37.5", "127.0")},
                {"provider": "kakao", "payload": _kakao("1", "37.5", "127.0")},
                {"provider": "google", "payload": {"place_id": "g1", "name": "Google Cafe", "types": ["cafe"]}},
            ],
            "display": True,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 2
    assert body["meta"] == {"inputCount": 3, "duplicatesRemoved": 1}
    assert [row["rank"] for row in body["places"]] == [1, 2]
    assert body["places"][1]["provider"] == "google"


def test_geocode_requires_a_query(client: TestClient):
    assert client.get("/api/geocode").status_code == 400


def test_geocode_address(client: TestClient, monkeypatch):
    class DummyGeocoder:
        def address_to_coord(self, address):
            return GeocodeMatch(point=Point(lat=37.4979, lng=127.0276), address="서울 강남구", match_type="landmark")

    monkeypatch.setattr(geocode_routes, "get_geocoder", lambda: DummyGeocoder())
    response = client.get("/api/geocode", params={"address": "강남역"})

    assert response.status_code == 200
    assert response.json()["result"]["type"] == "landmark"


def test_geocode_without_key_is_service_unavailable(client: TestClient, monkeypatch):
    def _missing():
        raise ConfigError("KAKAO_REST_API_KEY is not set.")

    monkeypatch.setattr(geocode_routes, "get_geocoder", _missing)

    assert client.get("/api/geocode", params={"lat": 37.5, "lng": 127.0}).status_code == 503

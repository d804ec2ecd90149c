import math

import pytest

from roadside.models.domain import Point, RouteGeometry
from roadside.services.geospatial import polyline_length_m
from roadside.services.routing.segmenter import (
    SegmentOptions,
    build_search_plans,
    optimal_interval,
    segment_route,
    segment_route_by_polyline,
)

METRES_PER_DEGREE_LAT = 2 * math.pi * 6_371_000.0 / 360


def _meridian(count: int, spacing_m: float, start_lat: float = 36.0, lng: float = 127.5) -> RouteGeometry:
    step = spacing_m / METRES_PER_DEGREE_LAT
    return RouteGeometry.from_points([Point(lat=start_lat + i * step, lng=lng) for i in range(count)])


def _assert_sample_invariants(result, total):
    samples = result.samples
    assert samples[0].label == "start"
    assert samples[0].distance_from_start == 0
    assert samples[-1].label == "end"
    assert samples[-1].distance_from_start == round(total)
    distances = [s.distance_from_start for s in samples]
    assert distances == sorted(distances)
    assert len(samples) <= 22


def test_straight_line_twelve_kilometres_gives_three_samples():
    start = Point(lat=37.0, lng=127.0)
    end = Point(lat=37.0 + 12_000 / METRES_PER_DEGREE_LAT, lng=127.0)

    result = segment_route(start, end, SegmentOptions(interval=5000))
    payload = result.to_dict()

    assert payload["numSegments"] == 2
    assert [s["label"] for s in payload["segments"]] == ["start", "segment_1", "end"]
    assert payload["segments"][1]["distanceFromStart"] == pytest.approx(6000, abs=1)
    assert payload["segments"][2]["distanceFromStart"] == pytest.approx(12000, abs=1)
    assert payload["segments"][0]["point"] == {"x": 127.0, "y": 37.0}


def test_straight_line_shorter_than_interval_keeps_start_and_end():
    result = segment_route(Point(37.0, 127.0), Point(37.001, 127.0))

    assert [s.label for s in result.samples] == ["start", "end"]
    assert result.num_segments == 1


def test_segment_options_reject_non_positive_values():
    with pytest.raises(ValueError):
        SegmentOptions(interval=0)
    with pytest.raises(ValueError):
        SegmentOptions(search_radius=-1)


def test_optimal_interval_short_and_long_routes():
    assert optimal_interval(30_000, 5000) == 10_000
    assert optimal_interval(500_000, 5000) == 25_000


@pytest.mark.parametrize("count,spacing", [(2, 3000.0), (50, 1000.0), (5000, 100.0)])
def test_polyline_sampler_bounds(count, spacing):
    geometry = _meridian(count, spacing)
    total = polyline_length_m(geometry.points)

    result = segment_route_by_polyline(geometry, SegmentOptions.for_polyline(5000))

    _assert_sample_invariants(result, total)
    assert result.interval == optimal_interval(total, 5000)


def test_polyline_sampler_two_points_has_no_interior_samples():
    result = segment_route_by_polyline(_meridian(2, 30_000.0), SegmentOptions.for_polyline(5000))

    assert [s.label for s in result.samples] == ["start", "end"]


def test_polyline_sampler_reports_cumulative_distance():
    result = segment_route_by_polyline(_meridian(50, 1000.0), SegmentOptions.for_polyline(5000))
    interior = result.samples[1:-1]

    assert interior
    for previous, sample in zip(interior, interior[1:]):
        assert sample.distance_from_start - previous.distance_from_start >= result.interval - 1


def test_zero_length_route_emits_only_start_and_end():
    here = Point(37.5, 127.0)
    result = segment_route_by_polyline(RouteGeometry.from_points([here, here, here]))

    assert [s.label for s in result.samples] == ["start", "end"]
    assert result.total_distance == 0


def test_route_geometry_needs_two_points():
    with pytest.raises(ValueError):
        RouteGeometry.from_points([Point(37.0, 127.0)])


def test_build_search_plans_passes_params_through():
    result = segment_route(Point(37.0, 127.0), Point(37.1, 127.0), SegmentOptions(interval=5000, search_radius=1500))

    plans = build_search_plans(result, query="카페")

    assert [plan["step"] for plan in plans] == list(range(1, len(result.samples) + 1))
    first = plans[0]
    assert first["action"] == "keyword_search"
    assert first["params"] == {"x": 127.0, "y": 37.0, "radius": 1500, "query": "카페"}
    assert first["meta"] == {"label": "start", "distanceFromStart": 0}

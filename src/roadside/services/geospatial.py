"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import LineString

from ..models.domain import Point

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(a: Point, b: Point) -> float:
    """Great-circle distance in metres between two points using the Haversine formula."""

    if a.lat == b.lat and a.lng == b.lng:
        return 0.0

    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h a hair outside [0, 1] near the antipode.
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates in kilometres."""

    return haversine_m(Point(lat1, lon1), Point(lat2, lon2)) / 1000.0


def interpolate(a: Point, b: Point, fraction: float) -> Point:
    """Linear interpolation of latitude and longitude between ``a`` and ``b``.

    This is a planar approximation, not a geodesic slerp. It is accurate enough
    for the few-kilometre spacing the route sampler works with, but drifts from
    the great circle on long legs and does not handle antimeridian crossings.
    """

    if fraction <= 0:
        return a
    if fraction >= 1:
        return b
    if a == b:
        return a

    line = LineString([(a.lng, a.lat), (b.lng, b.lat)])
    mid = line.interpolate(fraction, normalized=True)
    return Point(lat=mid.y, lng=mid.x)


def polyline_length_m(points: Sequence[Point]) -> float:
    """Total length of a polyline as the sum of its great-circle legs."""

    total = 0.0
    for prev, curr in zip(points, points[1:]):
        total += haversine_m(prev, curr)
    return total

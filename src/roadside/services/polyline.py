"""Decoders for the route geometry formats returned by directions providers."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..errors import PolylineDecodeError
from ..models.domain import Point


def _decode_value(polyline: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(polyline):
            raise PolylineDecodeError(f"Polyline truncated at character {index}.")
        b = ord(polyline[index]) - 63
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if (result & 1) else (result >> 1)
    return delta, index


def decode_polyline(polyline: str, precision: int = 5) -> list[Point]:
    """Decode Google polyline string to a list of points.

    Google Routes returns geometry in the encoded polyline format with 1e5
    precision; pass ``precision=6`` for polyline6 sources.

    Args:
        polyline: Encoded polyline string

    Returns:
        Points in emission order
    """
    factor = 10**precision
    points: list[Point] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(polyline):
        dlat, index = _decode_value(polyline, index)
        dlng, index = _decode_value(polyline, index)
        lat += dlat
        lng += dlng
        points.append(Point(lat=lat / factor, lng=lng / factor))

    return points


def _vertex_key(lat: float, lng: float) -> str:
    return f"{lat:.6f},{lng:.6f}"


def decode_vertexes(vertexes: Iterable[float], previous_key: str | None = None) -> tuple[list[Point], str | None]:
    """Decode one flat ``[lng0, lat0, lng1, lat1, ...]`` array.

    Consecutive duplicates (compared at 6 decimals) are collapsed, including a
    duplicate of ``previous_key`` carried over from the preceding road.
    """
    values = list(vertexes)
    points: list[Point] = []
    last_key = previous_key
    # A dangling odd value has no latitude partner.
    for i in range(0, len(values) - 1, 2):
        lng = float(values[i])
        lat = float(values[i + 1])
        key = _vertex_key(lat, lng)
        if key == last_key:
            continue
        points.append(Point(lat=lat, lng=lng))
        last_key = key
    return points, last_key


def decode_vertex_sections(sections: Iterable[Mapping[str, Any]]) -> list[Point]:
    """Flatten Kakao Mobility route sections into one ordered point sequence."""
    points: list[Point] = []
    last_key: str | None = None
    for section in sections or []:
        for road in section.get("roads") or []:
            decoded, last_key = decode_vertexes(road.get("vertexes") or [], last_key)
            points.extend(decoded)
    return points

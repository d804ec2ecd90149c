"""Route segmentation: pick search centres along a route.

Two modes are supported. ``segment_route`` spaces points evenly on the straight
line between start and end. ``segment_route_by_polyline`` walks a real route
geometry and emits a sample every time the distance travelled since the last
sample reaches an adaptive interval. The interval is chosen so a route never
produces more than ``MAX_INTERIOR_SAMPLES`` interior samples, which bounds the
number of downstream search calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ...config import settings
from ...models.domain import Point, RouteGeometry, RouteSample
from ..geospatial import haversine_m, interpolate, polyline_length_m

MAX_INTERIOR_SAMPLES = 20


@dataclass(frozen=True, slots=True)
class SegmentOptions:
    """Sampling options. ``interval`` is ignored in polyline mode."""

    interval: int = 5000
    search_radius: int = 2000

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError("interval must be positive.")
        if self.search_radius <= 0:
            raise ValueError("search_radius must be positive.")

    @classmethod
    def from_settings(cls) -> "SegmentOptions":
        return cls(interval=settings.segment_interval_m, search_radius=settings.segment_search_radius_m)

    @classmethod
    def for_polyline(cls, search_radius: int | None = None) -> "SegmentOptions":
        return cls(
            interval=settings.segment_interval_m,
            search_radius=search_radius if search_radius is not None else settings.polyline_search_radius_m,
        )


@dataclass(slots=True)
class SegmentationResult:
    total_distance: int
    interval: int
    search_radius: int
    samples: list[RouteSample] = field(default_factory=list)

    @property
    def num_segments(self) -> int:
        # Legs between consecutive samples, so a 12 km line at 5 km reports 2.
        return max(0, len(self.samples) - 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDistance": self.total_distance,
            "numSegments": self.num_segments,
            "interval": self.interval,
            "searchRadius": self.search_radius,
            "segments": [
                {
                    "point": sample.point.to_xy(),
                    "searchRadius": self.search_radius,
                    "distanceFromStart": sample.distance_from_start,
                    "label": sample.label,
                }
                for sample in self.samples
            ],
        }


def segment_route(start: Point, end: Point, options: SegmentOptions | None = None) -> SegmentationResult:
    """Evenly space search centres on the straight line from ``start`` to ``end``."""

    options = options or SegmentOptions()
    total = haversine_m(start, end)
    num_segments = max(1, math.floor(total / options.interval))

    samples = [RouteSample(point=start, distance_from_start=0, label="start")]
    for i in range(1, num_segments):
        fraction = i / num_segments
        samples.append(
            RouteSample(
                point=interpolate(start, end, fraction),
                distance_from_start=round(total * fraction),
                label=f"segment_{i}",
            )
        )
    samples.append(RouteSample(point=end, distance_from_start=round(total), label="end"))

    return SegmentationResult(
        total_distance=round(total),
        interval=options.interval,
        search_radius=options.search_radius,
        samples=samples,
    )


def optimal_interval(total_distance: float, search_radius: int) -> int:
    """Sampling interval that covers the route with at most 20 interior samples.

    Each sample covers ``2 * search_radius`` of road. Short routes use exactly
    that; longer routes stretch the interval to ``ceil(total / 20)``.
    """
    max_coverage = 2 * search_radius
    min_points = math.ceil(total_distance / max_coverage)
    if min_points <= MAX_INTERIOR_SAMPLES:
        return max_coverage
    return math.ceil(total_distance / MAX_INTERIOR_SAMPLES)


def sample_along_polyline(geometry: RouteGeometry, search_radius: int = 5000) -> tuple[list[RouteSample], float, int]:
    """Return ``(samples, total_distance, interval)`` for a route geometry.

    The accumulator restarts from zero at each emitted vertex, so spacing is
    roughly even rather than exact multiples of the interval.
    """
    points = geometry.points
    total = polyline_length_m(points)
    interval = optimal_interval(total, search_radius)

    samples = [RouteSample(point=points[0], distance_from_start=0, label="start")]
    accumulated = 0.0
    travelled = 0.0
    segment_index = 1
    last_index = len(points) - 1

    for i in range(1, len(points)):
        leg = haversine_m(points[i - 1], points[i])
        accumulated += leg
        travelled += leg
        if i == last_index:
            continue
        if accumulated >= interval:
            samples.append(
                RouteSample(
                    point=points[i],
                    distance_from_start=round(travelled),
                    label=f"segment_{segment_index}",
                )
            )
            segment_index += 1
            accumulated = 0.0

    samples.append(RouteSample(point=points[-1], distance_from_start=round(total), label="end"))
    return samples, total, interval


def segment_route_by_polyline(
    geometry: RouteGeometry, options: SegmentOptions | None = None
) -> SegmentationResult:
    """Segment a real route geometry; same output shape as ``segment_route``."""

    options = options or SegmentOptions.for_polyline()
    samples, total, interval = sample_along_polyline(geometry, options.search_radius)
    return SegmentationResult(
        total_distance=round(total),
        interval=interval,
        search_radius=options.search_radius,
        samples=samples,
    )


def build_search_plans(result: SegmentationResult, **search_params: Any) -> list[dict[str, Any]]:
    """Turn samples into keyword-search plans for the place search collaborator."""

    return [
        {
            "step": index + 1,
            "action": "keyword_search",
            "params": {
                "x": sample.point.lng,
                "y": sample.point.lat,
                "radius": result.search_radius,
                **search_params,
            },
            "meta": {
                "label": sample.label,
                "distanceFromStart": sample.distance_from_start,
            },
        }
        for index, sample in enumerate(result.samples)
    ]

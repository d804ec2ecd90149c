"""Route geometry sampling and directions providers."""

from .segmenter import (
    SegmentationResult,
    SegmentOptions,
    build_search_plans,
    optimal_interval,
    segment_route,
    segment_route_by_polyline,
)

__all__ = [
    "SegmentationResult",
    "SegmentOptions",
    "build_search_plans",
    "optimal_interval",
    "segment_route",
    "segment_route_by_polyline",
]

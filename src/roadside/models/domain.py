"""Domain models for route geometry, travel estimates and canonical places."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Sequence


class Provider(str, Enum):
    KAKAO = "kakao"
    GOOGLE = "google"


class TravelMode(str, Enum):
    WALKING = "walking"
    DRIVING = "driving"


class DistanceSource(str, Enum):
    MATRIX = "matrix"
    HAVERSINE = "haversine"


@dataclass(frozen=True, slots=True)
class Point:
    """A WGS84 coordinate. Externally serialised as ``{x: lng, y: lat}``."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")

    def to_xy(self) -> dict[str, float]:
        return {"x": self.lng, "y": self.lat}

    @classmethod
    def from_xy(cls, x: float, y: float) -> "Point":
        return cls(lat=float(y), lng=float(x))


@dataclass(frozen=True, slots=True)
class RouteGeometry:
    """Ordered vertices of a route; the first is the start and the last the end."""

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError("A route geometry needs at least two points.")

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "RouteGeometry":
        return cls(points=tuple(points))

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True, slots=True)
class RouteSample:
    point: Point
    distance_from_start: int
    label: str


@dataclass(frozen=True, slots=True)
class TravelEstimate:
    distance_meters: int
    duration_seconds: Optional[int]
    mode: TravelMode
    source: DistanceSource


@dataclass(slots=True)
class PlaceContext:
    """Interpretation metadata attached by downstream collaborators."""

    tags: list[str] = field(default_factory=list)
    suitability: list[str] = field(default_factory=list)
    price_hint: Optional[str] = None
    time_match: Optional[str] = None
    route_segment: Optional[str] = None
    distance_from_start: Optional[int] = None
    area_group: Optional[str] = None
    day_group: Optional[int] = None
    trip_role: Optional[str] = None
    disclaimer: Optional[str] = None

    def copy(self, **changes: Any) -> "PlaceContext":
        changes.setdefault("tags", list(self.tags))
        changes.setdefault("suitability", list(self.suitability))
        return replace(self, **changes)


@dataclass(slots=True)
class Place:
    """Canonical place record, whatever provider it came from."""

    id: Optional[str]
    provider: Provider
    display_name: str
    formatted_address: str
    road_address: Optional[str]
    location: Optional[Point]
    category_code: str
    category_name: str
    category_group_name: str
    category_path: list[str]
    detail_category: str
    phone: str
    place_url: str
    distance: Optional[int] = None
    open_now: Optional[bool] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    photo_reference: Optional[str] = None
    photo_url: Optional[str] = None
    travel: Optional[TravelEstimate] = None
    context: PlaceContext = field(default_factory=PlaceContext)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def lat(self) -> Optional[float]:
        return self.location.lat if self.location else None

    @property
    def lng(self) -> Optional[float]:
        return self.location.lng if self.location else None

    def evolve(self, **changes: Any) -> "Place":
        """Copy with ``changes`` applied; the copy owns its lists and ``raw`` dict."""
        changes.setdefault("category_path", list(self.category_path))
        changes.setdefault("context", self.context.copy())
        changes.setdefault("raw", dict(self.raw))
        return replace(self, **changes)

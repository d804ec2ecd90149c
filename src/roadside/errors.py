"""Error taxonomy shared by the routing, distance and places services."""

from __future__ import annotations


class RoadsideError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(RoadsideError):
    """A required credential is absent or still holds a placeholder value."""


class DistanceServiceError(RoadsideError):
    """Recoverable failure talking to an external distance, routing or geocoding service."""


class NetworkError(DistanceServiceError):
    """Transport-level failure (DNS, refused connection, timeout)."""


class UpstreamStatusError(DistanceServiceError):
    """The service answered, but with a non-success HTTP code or status body."""

    def __init__(self, status: str, message: str | None = None) -> None:
        self.status = status
        self.message = message or ""
        detail = f"{status} - {self.message}" if self.message else status
        super().__init__(f"Upstream service error: {detail}")


class ElementUnresolved(DistanceServiceError):
    """One destination of an otherwise successful matrix row could not be resolved."""

    def __init__(self, index: int, status: str) -> None:
        self.index = index
        self.status = status
        super().__init__(f"Destination {index} unresolved ({status})")


class AllElementsUnresolved(DistanceServiceError):
    """Every destination in the operation came back unresolved."""

    def __init__(self, count: int, statuses: set[str] | None = None) -> None:
        self.count = count
        self.statuses = statuses or set()
        joined = ", ".join(sorted(self.statuses)) or "unknown"
        super().__init__(
            f"Distance Matrix returned no route for all {count} destinations ({joined}); "
            "using straight-line distance instead"
        )


class PolylineDecodeError(ValueError):
    """Encoded polyline ended in the middle of a coordinate."""

"""Filter candidate places by real travel distance from an origin.

Distances come from the Distance Matrix service where possible. Failures are
absorbed at three levels:

* element: a destination the service could not route gets a straight-line
  distance and the result is marked ``partial``;
* operation, all unresolved: if no destination at all could be routed the
  matrix answers are discarded and every candidate is measured in a straight
  line;
* operation, service failure: a transport error, an HTTP error or a non-OK
  top-level status stops further batches and every candidate is measured in a
  straight line.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...errors import AllElementsUnresolved, DistanceServiceError, ElementUnresolved
from ...models.domain import DistanceSource, Place, Point, TravelEstimate, TravelMode
from ..geospatial import haversine_m
from .matrix_client import DistanceMatrixClient
from .models import (
    BatchOutcome,
    BatchStatus,
    DistanceFilterResult,
    ElementOutcome,
    ElementStatus,
    ResolutionStatus,
    ResolverConfig,
)

logger = logging.getLogger(__name__)

NO_CLIENT_REASON = "Distance Matrix client is not configured"


def select_mode(threshold: int, override: TravelMode | str | None = None, walking_threshold_m: int = 2000) -> TravelMode:
    """Explicit override wins; otherwise short thresholds walk and long ones drive."""
    if override:
        return TravelMode(override)
    return TravelMode.WALKING if threshold <= walking_threshold_m else TravelMode.DRIVING


def straight_line_estimate(origin: Point, destination: Point, mode: TravelMode) -> TravelEstimate:
    return TravelEstimate(
        distance_meters=int(round(haversine_m(origin, destination))),
        duration_seconds=None,
        mode=mode,
        source=DistanceSource.HAVERSINE,
    )


class DistanceResolver:
    """Resolve origin-to-place travel distances with graceful degradation.

    ``client`` may be ``None`` for callers that deliberately run without a
    Distance Matrix credential; every call then degrades to straight-line
    distance and says so in the result.
    """

    def __init__(self, client: Optional[DistanceMatrixClient], config: ResolverConfig | None = None) -> None:
        self.client = client
        self.config = config or ResolverConfig()

    def filter_by_distance(
        self,
        origin: Point,
        places: Sequence[Place],
        threshold: int,
        mode: TravelMode | str | None = None,
    ) -> DistanceFilterResult:
        travel_mode = select_mode(threshold, mode, self.config.walking_threshold_m)

        measurable = [place for place in places if place.location is not None]
        unmeasurable = len(places) - len(measurable)
        if unmeasurable:
            logger.warning(f"{unmeasurable} places have no coordinates and were filtered out")

        if self.client is None:
            logger.warning(f"{NO_CLIENT_REASON}; using straight-line distance for {len(measurable)} places")
            return self._straight_line_result(
                origin, measurable, threshold, travel_mode,
                api_calls=0,
                reason=NO_CLIENT_REASON,
                cause="ConfigError",
                extra_filtered=unmeasurable,
            )

        api_calls = 0
        outcomes: list[ElementOutcome] = []
        batch_size = self.config.batch_size
        for batch_index, start in enumerate(range(0, len(measurable), batch_size)):
            batch = measurable[start : start + batch_size]
            api_calls += 1
            batch_outcome = self._run_batch(batch_index, start, origin, batch, travel_mode)
            if batch_outcome.status is BatchStatus.FAILED:
                error = batch_outcome.error
                logger.warning(
                    f"Distance Matrix batch {batch_index} failed ({type(error).__name__}: {error}); "
                    f"using straight-line distance for all {len(measurable)} places"
                )
                return self._straight_line_result(
                    origin, measurable, threshold, travel_mode,
                    api_calls=api_calls,
                    reason=str(error),
                    cause=type(error).__name__,
                    extra_filtered=unmeasurable,
                )
            outcomes.extend(batch_outcome.elements)

        if outcomes and all(outcome.status is ElementStatus.UNRESOLVED for outcome in outcomes):
            error = AllElementsUnresolved(
                len(outcomes), {outcome.cause.status for outcome in outcomes if outcome.cause}
            )
            logger.warning(str(error))
            return self._straight_line_result(
                origin, measurable, threshold, travel_mode,
                api_calls=api_calls,
                reason=str(error),
                cause=type(error).__name__,
                extra_filtered=unmeasurable,
            )

        result = self._collect(outcomes, threshold, travel_mode, api_calls, unmeasurable)
        if result.partial_fallback:
            logger.warning(f"{result.partial_fallback_count} places measured in a straight line (partial fallback)")
        logger.info(
            f"Distance filter kept {len(result.places)}/{len(places)} places "
            f"({result.status.value}, {api_calls} API calls, mode={travel_mode.value})"
        )
        return result

    def _run_batch(
        self,
        batch_index: int,
        offset: int,
        origin: Point,
        batch: Sequence[Place],
        mode: TravelMode,
    ) -> BatchOutcome:
        try:
            elements = self.client.fetch_row(origin, [place.location for place in batch], mode)
        except DistanceServiceError as exc:
            return BatchOutcome(index=batch_index, status=BatchStatus.FAILED, error=exc)

        outcomes: list[ElementOutcome] = []
        for position, place in enumerate(batch):
            element = elements[position]
            if element.resolved:
                outcomes.append(
                    ElementOutcome(
                        place=place,
                        status=ElementStatus.RESOLVED,
                        estimate=TravelEstimate(
                            distance_meters=element.distance_meters,
                            duration_seconds=element.duration_seconds,
                            mode=mode,
                            source=DistanceSource.MATRIX,
                        ),
                    )
                )
            else:
                outcomes.append(
                    ElementOutcome(
                        place=place,
                        status=ElementStatus.UNRESOLVED,
                        estimate=straight_line_estimate(origin, place.location, mode),
                        cause=ElementUnresolved(offset + position, element.status),
                    )
                )
        return BatchOutcome(index=batch_index, status=BatchStatus.OK, elements=outcomes)

    def _collect(
        self,
        outcomes: Sequence[ElementOutcome],
        threshold: int,
        mode: TravelMode,
        api_calls: int,
        extra_filtered: int,
    ) -> DistanceFilterResult:
        kept: list[Place] = []
        filtered_out = extra_filtered
        for outcome in outcomes:
            if outcome.estimate.distance_meters <= threshold:
                kept.append(outcome.place.evolve(travel=outcome.estimate))
            else:
                filtered_out += 1
        kept.sort(key=lambda place: place.travel.distance_meters)

        unresolved = sum(1 for outcome in outcomes if outcome.status is ElementStatus.UNRESOLVED)
        return DistanceFilterResult(
            places=kept,
            filtered_out_count=filtered_out,
            api_calls=api_calls,
            threshold=threshold,
            mode=mode,
            status=ResolutionStatus.PARTIAL if unresolved else ResolutionStatus.OK,
            partial_fallback_count=unresolved,
        )

    def _straight_line_result(
        self,
        origin: Point,
        places: Sequence[Place],
        threshold: int,
        mode: TravelMode,
        *,
        api_calls: int,
        reason: str,
        cause: str,
        extra_filtered: int,
    ) -> DistanceFilterResult:
        outcomes = [
            ElementOutcome(
                place=place,
                status=ElementStatus.UNRESOLVED,
                estimate=straight_line_estimate(origin, place.location, mode),
            )
            for place in places
        ]
        result = self._collect(outcomes, threshold, mode, api_calls, extra_filtered)
        result.status = ResolutionStatus.FALLBACK
        result.partial_fallback_count = 0
        result.fallback_reason = reason
        result.fallback_cause = cause
        return result

"""Pick the service the user means out of a station's departures."""

import logging
from collections.abc import Iterable

from .models import ServiceCandidate, StationRef, parse_hhmm

logger = logging.getLogger(__name__)


class NoMatchError(Exception):
    """Raised when no candidate runs to the destination with a booked departure."""

    def __init__(self, destination: StationRef, requested_departure: str, searched: int = 0):
        super().__init__(
            f"No service to {destination} found near {requested_departure} "
            f"({searched} services searched)"
        )
        self.destination = destination
        self.requested_departure = requested_departure
        self.searched = searched


def runs_to(candidate: ServiceCandidate, destination: StationRef) -> bool:
    """True if the candidate's first listed destination is `destination`."""
    first = candidate.destination
    if first is None:
        return False
    return destination.overlaps(first.station) or first.station.overlaps(destination)


def match_service(
    candidates: Iterable[ServiceCandidate],
    destination: StationRef,
    requested_departure: str,
) -> ServiceCandidate:
    """
    Return the candidate to `destination` whose booked departure is closest to
    `requested_departure` (HHMM).

    Closeness is the absolute difference in minutes, with no day rollover.
    Candidates without a parsable booked departure are skipped. On equal
    closeness the earlier candidate in the list wins.
    """
    requested = parse_hhmm(requested_departure)
    if requested is None:
        raise ValueError(f"Invalid departure time {requested_departure!r}, expected HHMM")

    candidates = list(candidates)
    best: ServiceCandidate | None = None
    best_closeness: int | None = None

    for candidate in candidates:
        if not runs_to(candidate, destination):
            continue

        booked = parse_hhmm(candidate.detail.booked_departure)
        if booked is None:
            continue

        closeness = abs(requested - booked)
        if best_closeness is None or closeness < best_closeness:
            best = candidate
            best_closeness = closeness

    if best is None:
        raise NoMatchError(destination, requested_departure, searched=len(candidates))

    logger.debug(
        "Matched service %s departing %s (closeness %d)",
        best.service_uid, best.detail.booked_departure, best_closeness,
    )
    return best

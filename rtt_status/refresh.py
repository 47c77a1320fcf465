"""Refresh state machine for the one service being tracked."""

import logging
from datetime import date
from enum import Enum
from time import monotonic

from .api import FetchError, RttClient
from .models import ServiceSnapshot

logger = logging.getLogger(__name__)


def _now() -> float:
    """Steady clock in seconds. Extracted for test patching."""
    return monotonic()


class TrackerState(Enum):
    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


class ServiceTracker:
    """
    Owns the matched service and its latest live snapshot.

    UNINITIALIZED holds no snapshot; the first successful fetch moves the
    tracker to TRACKING. The snapshot is replaced by a single assignment on
    each successful refresh, so readers only ever see a complete one.

    A failed refresh keeps the previous snapshot and is retried one interval
    later, unless exit_on_error is set, in which case the FetchError
    propagates to the caller.
    """

    def __init__(
        self,
        client: RttClient,
        service_uid: str,
        run_date: date,
        refresh_interval: float,
        exit_on_error: bool = False,
    ):
        self.client = client
        self.service_uid = service_uid
        self.run_date = run_date
        self.refresh_interval = refresh_interval
        self.exit_on_error = exit_on_error

        self.snapshot: ServiceSnapshot | None = None
        self.last_fetch: float | None = None
        self.last_attempt: float | None = None
        self.last_error: str | None = None
        self.fetch_count = 0

    @property
    def state(self) -> TrackerState:
        if self.snapshot is None:
            return TrackerState.UNINITIALIZED
        return TrackerState.TRACKING

    def _fetch(self, now: float) -> ServiceSnapshot:
        self.last_attempt = now
        self.fetch_count += 1
        snapshot = self.client.fetch_service(self.service_uid, self.run_date)
        self.snapshot = snapshot
        self.last_fetch = now
        self.last_error = None
        logger.debug("Fetched service %s (%d stops)", self.service_uid, len(snapshot.stops))
        return snapshot

    def start(self, now: float | None = None) -> ServiceSnapshot:
        """Initial fetch. Any FetchError propagates."""
        return self._fetch(_now() if now is None else now)

    def is_due(self, now: float) -> bool:
        if self.last_attempt is None:
            return True
        return now - self.last_attempt >= self.refresh_interval

    def on_tick(self, now: float | None = None) -> bool:
        """Refresh if the interval has elapsed. Returns True if a fetch was attempted."""
        now = _now() if now is None else now
        if not self.is_due(now):
            return False

        try:
            self._fetch(now)
        except FetchError as e:
            if self.exit_on_error:
                raise
            self.last_error = str(e)
            logger.warning("Refresh of %s failed, keeping last data: %s", self.service_uid, e)
        return True

    def seconds_since_update(self, now: float | None = None) -> int | None:
        if self.last_fetch is None:
            return None
        now = _now() if now is None else now
        return max(0, int(now - self.last_fetch))

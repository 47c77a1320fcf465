"""Data shapes for Realtime Trains responses and small pure helpers around them."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StopRole(str, Enum):
    """
    Position of a stop in a journey; decides which times and lateness apply.

    OTHER covers every displayAs value that is not a working stop, such as
    CANCELLED_CALL or PASS. It gets no lateness and blanks in both time
    columns.
    """
    ORIGIN = "ORIGIN"
    CALL = "CALL"
    DESTINATION = "DESTINATION"
    OTHER = "OTHER"

    @classmethod
    def from_display_as(cls, value: str | None) -> "StopRole":
        if value in ("ORIGIN", "STARTS"):
            return cls.ORIGIN
        if value in ("DESTINATION", "TERMINATES"):
            return cls.DESTINATION
        if value == "CALL":
            return cls.CALL
        return cls.OTHER


# serviceLocation value for a train standing at the stop's platform
AT_PLATFORM = "AT_PLAT"


@dataclass(frozen=True)
class StationRef:
    """
    A canonical station identifier.

    Upstream sends a location's tiploc either as a single string or as a list
    of equivalent codes; both are normalised to a tuple here and membership is
    tested with contains()/overlaps() rather than by looking at the shape.
    """
    codes: tuple[str, ...]
    name: str | None = None
    crs: str | None = None

    @classmethod
    def from_tiploc(cls, tiploc: str | list[str], name: str | None = None, crs: str | None = None) -> "StationRef":
        if isinstance(tiploc, str):
            codes = (tiploc.upper(),)
        elif isinstance(tiploc, list) and tiploc and all(isinstance(c, str) for c in tiploc):
            codes = tuple(c.upper() for c in tiploc)
        else:
            raise ValueError(f"Invalid tiploc: {tiploc!r}")
        return cls(codes=codes, name=name, crs=crs)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "StationRef":
        return cls.from_tiploc(data["tiploc"], name=data.get("name"), crs=data.get("crs"))

    @property
    def primary(self) -> str:
        return self.codes[0]

    def contains(self, code: str | None) -> bool:
        if not code:
            return False
        return code.upper() in self.codes

    def overlaps(self, other: "StationRef") -> bool:
        """True if any code of `other` is one of ours."""
        return any(self.contains(code) for code in other.codes)

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} ({self.crs or self.primary})"
        return self.primary


@dataclass(frozen=True)
class StopTime:
    """An origin or destination entry: station, description and public time."""
    station: StationRef
    description: str
    public_time: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "StopTime":
        return cls(
            station=StationRef.from_tiploc(data["tiploc"]),
            description=data["description"],
            public_time=data.get("publicTime") or "",
        )


@dataclass(frozen=True)
class StopDetail:
    """One stop of a live service."""
    description: str
    role: StopRole
    destination: tuple[StopTime, ...] = ()
    booked_departure: str | None = None
    realtime_arrival: str | None = None
    arrival_actual: bool = False
    realtime_departure: str | None = None
    departure_actual: bool = False
    arrival_lateness: int | None = None
    departure_lateness: int | None = None
    platform: str | None = None
    platform_changed: bool = False
    service_location: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "StopDetail":
        return cls(
            description=data["description"],
            role=StopRole.from_display_as(data.get("displayAs")),
            destination=tuple(StopTime.from_api(d) for d in data.get("destination") or []),
            booked_departure=data.get("gbttBookedDeparture"),
            realtime_arrival=data.get("realtimeArrival"),
            arrival_actual=bool(data.get("realtimeArrivalActual")),
            realtime_departure=data.get("realtimeDeparture"),
            departure_actual=bool(data.get("realtimeDepartureActual")),
            arrival_lateness=_optional_int(data.get("realtimeGbttArrivalLateness")),
            departure_lateness=_optional_int(data.get("realtimeGbttDepartureLateness")),
            platform=data.get("platform") or None,
            platform_changed=bool(data.get("platformChanged")),
            service_location=data.get("serviceLocation"),
        )

    @property
    def is_actual(self) -> bool:
        return self.arrival_actual or self.departure_actual

    @property
    def at_platform(self) -> bool:
        return self.service_location == AT_PLATFORM


@dataclass(frozen=True)
class ServiceCandidate:
    """A service found by a station search, as seen from that station."""
    service_uid: str
    detail: StopDetail
    run_date: str | None = None
    train_identity: str | None = None
    operator: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServiceCandidate":
        return cls(
            service_uid=data["serviceUid"],
            detail=StopDetail.from_api(data["locationDetail"]),
            run_date=data.get("runDate"),
            train_identity=data.get("trainIdentity"),
            operator=data.get("atocName"),
        )

    @property
    def destination(self) -> StopTime | None:
        return self.detail.destination[0] if self.detail.destination else None


@dataclass(frozen=True)
class LocationSearch:
    """Result of a station search: the resolved station and its services."""
    location: StationRef
    services: tuple[ServiceCandidate, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "LocationSearch":
        return cls(
            location=StationRef.from_api(data["location"]),
            services=tuple(ServiceCandidate.from_api(s) for s in data.get("services") or []),
        )


@dataclass(frozen=True)
class ServiceSnapshot:
    """The full live journey of one service at one point in time."""
    operator: str
    origin: tuple[StopTime, ...]
    destination: tuple[StopTime, ...]
    stops: tuple[StopDetail, ...] = field(default_factory=tuple)
    service_uid: str | None = None
    train_identity: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServiceSnapshot":
        return cls(
            operator=data["atocName"],
            origin=tuple(StopTime.from_api(o) for o in data["origin"]),
            destination=tuple(StopTime.from_api(d) for d in data["destination"]),
            stops=tuple(StopDetail.from_api(loc) for loc in data["locations"]),
            service_uid=data.get("serviceUid"),
            train_identity=data.get("trainIdentity"),
        )


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def parse_hhmm(value: str | None) -> int | None:
    """Parse a 4-digit 24-hour time like "0830" into minutes past midnight."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if len(value) != 4 or not value.isdigit():
        return None
    hours, minutes = int(value[:2]), int(value[2:])
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def visible_stops(stops: tuple[StopDetail, ...] | list[StopDetail], show_intermediary: bool) -> list[StopDetail]:
    """Stops to render, in journey order. Hiding intermediaries keeps only the two ends."""
    if show_intermediary:
        return list(stops)
    return [s for s in stops if s.role in (StopRole.ORIGIN, StopRole.DESTINATION)]

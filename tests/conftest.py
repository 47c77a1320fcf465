"""Shared test fixtures and helpers for rtt-status tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from rich.console import Console

from rtt_status.config import Credentials


# =============================================================================
# Constants
# =============================================================================


CREDENTIALS = Credentials("rttuser", "secret")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_credentials_env(monkeypatch):
    """Never let a developer's real credentials leak into tests."""
    monkeypatch.delenv("RTT_USERNAME", raising=False)
    monkeypatch.delenv("RTT_PASSWORD", raising=False)
    yield


# =============================================================================
# Test data helpers
# =============================================================================


def make_stop_time(tiploc="KNGX", description="London Kings Cross", public_time="1250"):
    """Build an origin/destination entry matching the API shape."""
    return {
        "tiploc": tiploc,
        "description": description,
        "workingTime": public_time + "00",
        "publicTime": public_time,
    }


def make_location_detail(
    description="York",
    display_as="CALL",
    destination=None,
    booked_departure="0830",
    arrival=None,
    arrival_actual=False,
    departure=None,
    departure_actual=False,
    arrival_lateness=None,
    departure_lateness=None,
    platform=None,
    platform_changed=False,
    service_location=None,
):
    """Build a locationDetail dict matching the API shape."""
    detail = {
        "realtimeActivated": True,
        "tiploc": "YORK",
        "crs": "YRK",
        "description": description,
        "gbttBookedDeparture": booked_departure,
        "origin": [make_stop_time("EDINBUR", "Edinburgh", "0600")],
        "destination": destination if destination is not None else [make_stop_time()],
        "isCall": True,
        "isPublicCall": True,
        "realtimeArrival": arrival,
        "realtimeArrivalActual": arrival_actual,
        "realtimeDeparture": departure,
        "realtimeDepartureActual": departure_actual,
        "realtimeGbttArrivalLateness": arrival_lateness,
        "realtimeGbttDepartureLateness": departure_lateness,
        "platform": platform,
        "platformConfirmed": False,
        "platformChanged": platform_changed,
        "displayAs": display_as,
    }
    if service_location is not None:
        detail["serviceLocation"] = service_location
    return detail


def make_service(service_uid="W12345", dest_tiploc="KNGX", booked_departure="0830", run_date="2025-03-15"):
    """Build a services[] entry of a location search."""
    return {
        "locationDetail": make_location_detail(
            description="Edinburgh",
            display_as="ORIGIN",
            destination=[make_stop_time(dest_tiploc)],
            booked_departure=booked_departure,
        ),
        "serviceUid": service_uid,
        "runDate": run_date,
        "trainIdentity": "1E09",
        "runningIdentity": "1E09",
        "atocCode": "GR",
        "atocName": "LNER",
        "serviceType": "train",
        "isPassenger": True,
    }


def make_search(tiploc="KNGX", name="London Kings Cross", crs="KGX", services=None):
    """Build a location search response."""
    return {
        "location": {"name": name, "crs": crs, "tiploc": tiploc, "country": "gb", "system": "nr"},
        "filter": None,
        "services": services,
    }


def make_service_response(locations=None, atoc_name="LNER"):
    """Build a service detail response."""
    return {
        "serviceUid": "W12345",
        "runDate": "2025-03-15",
        "serviceType": "train",
        "isPassenger": True,
        "trainIdentity": "1E09",
        "atocCode": "GR",
        "atocName": atoc_name,
        "origin": [make_stop_time("EDINBUR", "Edinburgh", "0830")],
        "destination": [make_stop_time("KNGX", "London Kings Cross", "1250")],
        "locations": locations if locations is not None else sample_journey_locations(),
    }


def sample_journey_locations():
    """Edinburgh -> York -> Kings Cross, departed Edinburgh late, standing at York."""
    return [
        make_location_detail(
            description="Edinburgh", display_as="ORIGIN",
            departure="0832", departure_actual=True, departure_lateness=2,
            platform="2",
        ),
        make_location_detail(
            description="York", display_as="CALL",
            arrival="1026", arrival_actual=True, arrival_lateness=1,
            departure="1029", departure_lateness=0,
            platform="5", platform_changed=True, service_location="AT_PLAT",
        ),
        make_location_detail(
            description="London Kings Cross", display_as="DESTINATION",
            booked_departure=None, arrival="1251", arrival_lateness=1,
        ),
    ]


def render_to_text(renderable, width=80) -> str:
    """Capture a Rich renderable as plain text for assertion."""
    console = Console(record=True, width=width, force_terminal=False)
    console.print(renderable)
    return console.export_text()


def load_fixture(name: str):
    """Load a JSON fixture file from tests/fixtures/."""
    fixture_path = Path(__file__).parent / "fixtures" / name
    with open(fixture_path) as f:
        return json.load(f)


def make_mock_response(json_response=None, text=None, status_code=200):
    """Create a mock httpx response; a non-2xx status raises from raise_for_status()."""
    mock_response = MagicMock()
    mock_response.status_code = status_code
    if text is None:
        text = json.dumps(json_response)
    mock_response.text = text
    if json_response is None:
        mock_response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    else:
        mock_response.json.return_value = json_response
    if status_code >= 400:
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}", request=MagicMock(), response=mock_response
        )
    else:
        mock_response.raise_for_status.return_value = None
    return mock_response


def make_mock_httpx_client(*responses):
    """Create a mock httpx.Client whose .get() returns the given responses in order.

    Plain dicts are wrapped as successful JSON responses.
    """
    wrapped = [r if isinstance(r, MagicMock) else make_mock_response(r) for r in responses]
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    if len(wrapped) == 1:
        mock_client.get.return_value = wrapped[0]
    else:
        mock_client.get.side_effect = wrapped
    return mock_client

"""HTTP access to the Realtime Trains API."""

import logging
from datetime import date
from pathlib import Path
from typing import Any

import httpx

from .config import API_BASE, HTTP_TIMEOUT, Credentials
from .models import LocationSearch, ServiceSnapshot, StationRef

logger = logging.getLogger(__name__)


class RttApiError(Exception):
    """Raised when an upstream call fails or its response cannot be interpreted.

    `raw` keeps the response body when parsing failed, and `dump_path` points
    at the copy written to the debug directory, if one was written.
    """

    def __init__(self, message: str, raw: str | None = None, dump_path: Path | None = None):
        super().__init__(message)
        self.raw = raw
        self.dump_path = dump_path


class ResolutionError(RttApiError):
    """Raised when a station search fails or is unparsable."""


class FetchError(RttApiError):
    """Raised when a service detail fetch fails or is unparsable."""


def _date_path(run_date: date) -> str:
    return run_date.strftime("%Y/%m/%d")


class RttClient:
    """Thin client for the two endpoints we use: location search and service detail."""

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = API_BASE,
        debug_dir: Path | None = None,
        dump_responses: bool = False,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.debug_dir = debug_dir
        self.dump_responses = dump_responses

    def _get(self, url: str, error_cls: type[RttApiError], what: str) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            with httpx.Client(
                timeout=HTTP_TIMEOUT,
                auth=(self.credentials.username, self.credentials.password),
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            raise error_cls(f"Unable to get {what}: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise error_cls(f"Unable to get {what}: {e}") from e

    def _dump(self, name: str, raw: str) -> Path | None:
        """Write a raw response body into the debug directory."""
        if self.debug_dir is None:
            return None
        path = Path(self.debug_dir) / f"{name}.json"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(raw)
        except OSError as e:
            logger.warning("Unable to write %s: %s", path, e)
            return None
        return path

    def _parse(self, response: httpx.Response, parser, error_cls: type[RttApiError], what: str, dump_name: str):
        raw = response.text
        try:
            data: Any = response.json()
            return parser(data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            dump_path = self._dump(dump_name, raw)
            logger.debug("Unparsable %s response (%d bytes)", what, len(raw))
            raise error_cls(f"Unable to parse {what}: {e}", raw=raw, dump_path=dump_path) from e

    def search(
        self,
        query: str,
        run_date: date | None = None,
        departure_time: str | None = None,
        dump_name: str = "search",
    ) -> LocationSearch:
        """Search a station, optionally narrowed to services around a date and time."""
        url = f"{self.base_url}/search/{query}"
        if run_date is not None:
            url += f"/{_date_path(run_date)}"
            if departure_time:
                url += f"/{departure_time}"

        response = self._get(url, ResolutionError, f"station {query}")
        result = self._parse(response, LocationSearch.from_api, ResolutionError, f"station {query}", dump_name)
        logger.debug("Search %s resolved to %s with %d services", query, result.location, len(result.services))
        return result

    def fetch_service(self, service_uid: str, run_date: date) -> ServiceSnapshot:
        """Fetch the live detail of one service on one day."""
        url = f"{self.base_url}/service/{service_uid}/{_date_path(run_date)}"
        response = self._get(url, FetchError, f"service {service_uid}")
        if self.dump_responses:
            self._dump("service", response.text)
        return self._parse(response, ServiceSnapshot.from_api, FetchError, f"service {service_uid}", "service")


def resolve_location(client: RttClient, query: str) -> StationRef:
    """Resolve free text (a CRS or tiploc) to the station the API reports first."""
    return client.search(query, dump_name="destination").location

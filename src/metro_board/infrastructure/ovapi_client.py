from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qs, urlsplit
from zoneinfo import ZoneInfo

import httpx

from metro_board.domain.entities import Departure
from metro_board.domain.exceptions import DataError, FetchError
from metro_board.domain.services import normalize_destination
from metro_board.infrastructure.headers import make_headers
from metro_board.infrastructure.time_utils import AMSTERDAM_TZ, parse_ovapi_datetime

logger = logging.getLogger(__name__)

HTTPS_API_BASE = "https://v0.ovapi.nl"
HTTP_API_BASE = "http://v0.ovapi.nl"
API_BASE_QUERY_PARAM = "api"
DEFAULT_TIMEOUT = 15.0  # seconds

METRO_TRANSPORT_TYPE = "METRO"


def resolve_api_base(page_url: str, global_override: str | None = None) -> str:
    """Pick the OVapi base URL once at startup.

    Order: the ``api`` query parameter of the page URL, then the global
    override, then the page scheme. A page served over https must talk to the
    https host since browsers block mixed content.
    Trailing slashes are stripped from configured bases.
    """
    parts = urlsplit(page_url)
    query_values = parse_qs(parts.query).get(API_BASE_QUERY_PARAM, [])
    if query_values and query_values[0]:
        return query_values[0].rstrip("/")
    if global_override:
        return global_override.rstrip("/")
    if parts.scheme == "https":
        return HTTPS_API_BASE
    return HTTP_API_BASE


class OvApiClient:
    """HTTP client for the OVapi ``/tpc`` (timing point code) endpoint.

    A single httpx.AsyncClient is shared for the process lifetime; its timeout
    bounds every request so one hung call cannot stall the refresh cadence.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_base: str = HTTP_API_BASE,
        tz: ZoneInfo = AMSTERDAM_TZ,
    ) -> None:
        self._http = http_client
        self._api_base = api_base.rstrip("/")
        self._tz = tz

    @property
    def api_base(self) -> str:
        return self._api_base

    async def fetch_departures_for_stop_code(self, code: str) -> list[Departure]:
        """GET /tpc/{code} and return its metro departures, unsorted.

        Raises FetchError on a non-2xx status and DataError when the payload
        has no entry for ``code``.
        """
        url = f"{self._api_base}/tpc/{code}"
        logger.debug("Fetching departures for stop code %s from %s", code, url)
        response = await self._http.get(url, headers=make_headers())
        self._raise_for_status(response)

        payload: Any = response.json()
        stop_node = payload.get(code) if isinstance(payload, dict) else None
        if not isinstance(stop_node, dict):
            raise DataError(f"No stop found for code {code}")

        passes: Any = stop_node.get("Passes") or {}
        if not isinstance(passes, dict):
            raise DataError(f"Malformed passes for stop code {code}")
        departures: list[Departure] = []
        for pass_id, raw in passes.items():
            if not isinstance(raw, dict):
                logger.warning("Skipping pass %s: not an object", pass_id)
                continue
            if raw.get("TransportType") != METRO_TRANSPORT_TYPE:
                continue
            departure = self._map_departure(pass_id, raw)
            if departure is not None:
                departures.append(departure)
        return departures

    def _map_departure(self, pass_id: str, raw: dict[str, Any]) -> Departure | None:
        """Map a raw pass record to a Departure; None when its time is unusable."""
        try:
            departure_time = parse_ovapi_datetime(raw.get("ExpectedDepartureTime"), self._tz)
        except ValueError as exc:
            logger.warning("Skipping pass %s: %s", pass_id, exc)
            return None
        destination = raw.get("DestinationName50")
        return Departure(
            line=str(raw.get("LinePublicNumber", "")),
            destination=normalize_destination(str(destination) if destination is not None else None),
            departure_time=departure_time,
        )

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise FetchError for any non-2xx response."""
        if not response.is_success:
            raise FetchError(response.status_code, f"API {response.status_code}: {response.url}")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

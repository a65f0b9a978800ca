"""
Geocoding gateway.

Provider-agnostic contract consumed by the location session and the MCP
tools, plus the Google Maps implementation. Provider payloads and
transport errors are collapsed into the tagged results from
`carlocator.schemas.location` before any caller sees them:

    forward_lookup    -> Candidates | NotFound | ProviderError
    resolve_candidate -> Found | NotFound | ProviderError
    reverse_lookup    -> Found | NotFound | ProviderError

Gateway methods never raise.
"""

from typing import Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from carlocator.clients.google_maps import GoogleMapsClient
from carlocator.config import settings
from carlocator.infrastructure.trace_decorator import traced
from carlocator.schemas.location import (
    CandidateLookup,
    Candidates,
    Coordinate,
    Found,
    NotFound,
    PlaceLookup,
    ProviderError,
)
from carlocator.utils.formatters import (
    format_candidates,
    format_place_details,
    format_reverse_geocode,
)

_PAYLOAD_ERRORS = (AttributeError, KeyError, TypeError, ValueError, ValidationError)


class GeocodingGateway(Protocol):
    def is_configured(self) -> bool: ...

    async def forward_lookup(
        self, query: str, session_token: str | None = None
    ) -> CandidateLookup: ...

    async def resolve_candidate(
        self, candidate_id: str, session_token: str | None = None
    ) -> PlaceLookup: ...

    async def reverse_lookup(self, coordinate: Coordinate) -> PlaceLookup: ...


def _describe_error(e: Exception) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        return f"HTTP {e.response.status_code}"
    return f"{type(e).__name__}: {e}"


class GoogleGeocodingGateway:
    """Geocoding gateway backed by Places API (New) and the Geocoding API.

    The HTTP client is created on first use and shared by every caller of
    this gateway afterwards. Build one gateway per process and pass it to
    the sessions and tools that need it.
    """

    def __init__(
        self,
        api_key: str | None = None,
        language: str | None = None,
        region: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = settings.GOOGLE_MAPS_API_KEY if api_key is None else api_key
        self._language = language or settings.GOOGLE_MAPS_LANGUAGE
        self._region = region or settings.GOOGLE_MAPS_REGION
        self._timeout = timeout or settings.GEOCODING_TIMEOUT_SECONDS
        self._transport = transport
        self._client: GoogleMapsClient | None = None

        if not self._api_key:
            logger.warning(
                "GOOGLE_MAPS_API_KEY is not configured. "
                "Location lookups are disabled; manual entry only."
            )

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> GoogleMapsClient:
        if self._client is None:
            self._client = GoogleMapsClient(
                api_key=self._api_key,
                language=self._language,
                region=self._region,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    @traced(span_name="geocoding.forward_lookup", handler_type="gateway")
    async def forward_lookup(
        self, query: str, session_token: str | None = None
    ) -> CandidateLookup:
        """City predictions for a text query."""
        query = query.strip()
        if not self.is_configured() or not query:
            return NotFound()

        try:
            suggestions = await self._get_client().autocomplete_cities(
                query, session_token=session_token
            )
            candidates = format_candidates(suggestions)
        except httpx.HTTPError as e:
            logger.warning(f"Autocomplete failed for {query!r}: {_describe_error(e)}")
            return ProviderError(message=_describe_error(e))
        except _PAYLOAD_ERRORS as e:
            logger.warning(f"Malformed autocomplete response for {query!r}: {e}")
            return ProviderError(message=_describe_error(e))

        if not candidates:
            return NotFound()
        return Candidates(items=candidates)

    @traced(span_name="geocoding.resolve_candidate", handler_type="gateway")
    async def resolve_candidate(
        self, candidate_id: str, session_token: str | None = None
    ) -> PlaceLookup:
        """Full place record for a candidate ID."""
        if not self.is_configured() or not candidate_id:
            return NotFound()

        try:
            payload = await self._get_client().get_place(
                candidate_id, session_token=session_token
            )
            place = format_place_details(payload)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.warning(f"Place {candidate_id!r} not found")
                return NotFound()
            logger.warning(f"Place details failed for {candidate_id!r}: {_describe_error(e)}")
            return ProviderError(message=_describe_error(e))
        except httpx.HTTPError as e:
            logger.warning(f"Place details failed for {candidate_id!r}: {_describe_error(e)}")
            return ProviderError(message=_describe_error(e))
        except _PAYLOAD_ERRORS as e:
            logger.warning(f"Malformed place details for {candidate_id!r}: {e}")
            return ProviderError(message=_describe_error(e))

        return Found(place=place)

    @traced(span_name="geocoding.reverse_lookup", handler_type="gateway")
    async def reverse_lookup(self, coordinate: Coordinate) -> PlaceLookup:
        """Best-matching place record for a coordinate."""
        if not self.is_configured():
            return NotFound()

        try:
            payload = await self._get_client().reverse_geocode(coordinate.lat, coordinate.lng)
            place = format_reverse_geocode(payload, coordinate)
        except httpx.HTTPError as e:
            logger.warning(f"Reverse geocode failed for {coordinate}: {_describe_error(e)}")
            return ProviderError(message=_describe_error(e))
        except _PAYLOAD_ERRORS as e:
            logger.warning(f"Reverse geocode failed for {coordinate}: {e}")
            return ProviderError(message=_describe_error(e))

        if place is None:
            return NotFound()
        return Found(place=place)

    async def aclose(self) -> None:
        """Close the HTTP client if it was ever created."""
        if self._client is not None:
            await self._client.close()
            self._client = None

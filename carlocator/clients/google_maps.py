"""
Google Maps HTTP client.

Wraps the three endpoints location resolution depends on:
- POST /v1/places:autocomplete        (Places API New, city predictions)
- GET  /v1/places/{place_id}          (Places API New, place details)
- GET  /maps/api/geocode/json         (Geocoding API, reverse lookup)
"""

import httpx
from loguru import logger

PLACES_BASE_URL = "https://places.googleapis.com/v1"
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

CITY_TYPES = ["(cities)"]

DETAIL_FIELD_MASK = ",".join([
    "id",
    "displayName",
    "formattedAddress",
    "location",
    "addressComponents",
])


class GoogleMapsClient:
    """Async client for Places autocomplete/details and reverse geocoding."""

    def __init__(
        self,
        api_key: str,
        language: str = "en",
        region: str = "IN",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY is not set.")
        self._api_key = api_key
        self._language = language
        self._region = region
        self._client = httpx.AsyncClient(
            headers={"X-Goog-Api-Key": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def autocomplete_cities(
        self,
        query: str,
        session_token: str | None = None,
    ) -> list[dict]:
        """Autocomplete: city predictions for a partial text input."""
        body: dict = {
            "input": query,
            "includedPrimaryTypes": CITY_TYPES,
            "languageCode": self._language,
            "regionCode": self._region,
        }
        if session_token:
            body["sessionToken"] = session_token

        logger.debug(f"Autocomplete: query={query!r}")
        response = await self._client.post(
            f"{PLACES_BASE_URL}/places:autocomplete",
            json=body,
        )
        response.raise_for_status()
        return response.json().get("suggestions", [])

    async def get_place(
        self,
        place_id: str,
        session_token: str | None = None,
    ) -> dict:
        """Place Details: address components and location for a place ID."""
        params: dict = {"languageCode": self._language, "regionCode": self._region}
        if session_token:
            params["sessionToken"] = session_token

        logger.debug(f"Place details: place_id={place_id!r}")
        response = await self._client.get(
            f"{PLACES_BASE_URL}/places/{place_id}",
            params=params,
            headers={"X-Goog-FieldMask": DETAIL_FIELD_MASK},
        )
        response.raise_for_status()
        return response.json()

    async def reverse_geocode(self, latitude: float, longitude: float) -> dict:
        """Reverse geocode: address results for a coordinate."""
        logger.debug(f"Reverse geocode: lat={latitude}, lng={longitude}")
        response = await self._client.get(
            GEOCODE_URL,
            params={
                "latlng": f"{latitude},{longitude}",
                "key": self._api_key,
                "language": self._language,
                "region": self._region.lower(),
            },
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

"""
Location MCP Server.

FastMCP instance exposing city suggestions, place resolution and
service-center proximity ranking, as plain lists and as map markers.
Built by `create_location_server` with the process-wide gateway and
directory injected by the tool registry.
"""

from fastmcp import FastMCP

from carlocator.infrastructure.trace_decorator import traced
from carlocator.schemas.facilities import NearbyFacilitiesResponse, NearbyQuery
from carlocator.schemas.location import (
    CandidateLookup,
    CandidateSearchResponse,
    Candidates,
    Coordinate,
    Found,
    PlaceLookup,
    PlaceResolutionResponse,
    ProviderError,
)
from carlocator.services.geocoding import GeocodingGateway
from carlocator.services.location_session import (
    CANDIDATE_FAILED_MESSAGE,
    CITY_UNDETERMINED_MESSAGE,
    DETECTION_FAILED_MESSAGE,
    SUGGESTIONS_FAILED_MESSAGE,
)
from carlocator.services.proximity import ProximityDirectory
from carlocator.utils.map_markers import FacilityMapResponse, build_facility_map

_READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
}


def candidate_response(result: CandidateLookup) -> CandidateSearchResponse:
    if isinstance(result, Candidates):
        return CandidateSearchResponse(count=len(result.items), candidates=result.items)
    warning = SUGGESTIONS_FAILED_MESSAGE if isinstance(result, ProviderError) else None
    return CandidateSearchResponse(count=0, candidates=[], warning=warning)


def place_response(result: PlaceLookup, failure_message: str) -> PlaceResolutionResponse:
    if isinstance(result, Found):
        if not result.place.is_valid:
            return PlaceResolutionResponse(warning=CITY_UNDETERMINED_MESSAGE)
        return PlaceResolutionResponse(place=result.place)
    return PlaceResolutionResponse(warning=failure_message)


def nearby_query(
    city: str,
    latitude: float | None,
    longitude: float | None,
    limit: int | None = None,
    radius_km: float | None = None,
) -> NearbyQuery:
    """Build a query, leaving omitted bounds to the configured defaults."""
    kwargs: dict = {"city": city.strip() or None}
    if latitude is not None and longitude is not None:
        kwargs["coordinate"] = Coordinate(lat=latitude, lng=longitude)
    if limit is not None:
        kwargs["limit"] = limit
    if radius_km is not None:
        kwargs["radius_km"] = radius_km
    return NearbyQuery(**kwargs)


def create_location_server(
    gateway: GeocodingGateway,
    directory: ProximityDirectory,
) -> FastMCP:
    location_mcp = FastMCP("locations")

    @location_mcp.tool(
        title="Suggest Cities",
        description=(
            "Suggest cities matching a partial text input. Returns candidate "
            "IDs to pass to resolve_city. Returns no candidates when location "
            "lookups are not configured."
        ),
        tags={"location", "autocomplete"},
        annotations={"title": "Suggest Cities", "openWorldHint": True, **_READ_ONLY},
    )
    @traced(span_name="mcp.tool.suggest_cities", handler_type="tool")
    async def suggest_cities(query: str) -> CandidateSearchResponse:
        """Suggest cities for a text query.

        Args:
            query: Partial city name (at least 2 characters, e.g. "Pun").
        """
        return candidate_response(await gateway.forward_lookup(query))

    @location_mcp.tool(
        title="Resolve City",
        description=(
            "Resolve a city candidate ID from suggest_cities into city, state, "
            "country, formatted address and coordinates."
        ),
        tags={"location", "details"},
        annotations={"title": "Resolve City", "openWorldHint": True, **_READ_ONLY},
    )
    @traced(span_name="mcp.tool.resolve_city", handler_type="tool")
    async def resolve_city(place_id: str) -> PlaceResolutionResponse:
        """Resolve a candidate into a place.

        Args:
            place_id: Candidate ID returned by suggest_cities.
        """
        result = await gateway.resolve_candidate(place_id)
        return place_response(result, CANDIDATE_FAILED_MESSAGE)

    @location_mcp.tool(
        title="Locate Coordinates",
        description="Find the city for a latitude/longitude pair (reverse geocoding).",
        tags={"location", "reverse"},
        annotations={"title": "Locate Coordinates", "openWorldHint": True, **_READ_ONLY},
    )
    @traced(span_name="mcp.tool.locate_coordinates", handler_type="tool")
    async def locate_coordinates(latitude: float, longitude: float) -> PlaceResolutionResponse:
        """Reverse geocode a coordinate.

        Args:
            latitude: Latitude in decimal degrees (e.g. 18.5204 for Pune).
            longitude: Longitude in decimal degrees (e.g. 73.8567 for Pune).
        """
        coordinate = Coordinate(lat=latitude, lng=longitude)
        result = await gateway.reverse_lookup(coordinate)
        return place_response(result, DETECTION_FAILED_MESSAGE)

    @location_mcp.tool(
        title="Find Service Centers",
        description=(
            "List service centers and pickup points for a city and/or coordinate. "
            "Exact city matches come first, then the nearest other facilities "
            "within the radius, nearest first."
        ),
        tags={"facilities", "nearby"},
        annotations={"title": "Find Service Centers", "openWorldHint": False, **_READ_ONLY},
    )
    @traced(span_name="mcp.tool.find_service_centers", handler_type="tool")
    async def find_service_centers(
        city: str = "",
        latitude: float | None = None,
        longitude: float | None = None,
        limit: int | None = None,
        radius_km: float | None = None,
    ) -> NearbyFacilitiesResponse:
        """Rank facilities near a place.

        Args:
            city: City name to match exactly (case-insensitive).
            latitude: Optional reference latitude.
            longitude: Optional reference longitude.
            limit: Maximum number of facilities (server default when omitted).
            radius_km: Radius for nearest matches in kilometres (server default when omitted).
        """
        query = nearby_query(city, latitude, longitude, limit, radius_km)
        facilities = directory.find_nearby(query)
        return NearbyFacilitiesResponse(count=len(facilities), facilities=facilities)

    @location_mcp.tool(
        title="Service Centers Map",
        description=(
            "Same ranking as find_service_centers, returned as map markers "
            "(styled by facility kind, with info text) and the viewport to show."
        ),
        tags={"facilities", "map"},
        annotations={"title": "Service Centers Map", "openWorldHint": False, **_READ_ONLY},
    )
    @traced(span_name="mcp.tool.service_centers_map", handler_type="tool")
    async def service_centers_map(
        city: str = "",
        latitude: float | None = None,
        longitude: float | None = None,
        limit: int | None = None,
        radius_km: float | None = None,
    ) -> FacilityMapResponse:
        """Markers and viewport for facilities near a place.

        Args:
            city: City name to match exactly (case-insensitive).
            latitude: Optional reference latitude, also the empty-map center.
            longitude: Optional reference longitude, also the empty-map center.
            limit: Maximum number of facilities (server default when omitted).
            radius_km: Radius for nearest matches in kilometres (server default when omitted).
        """
        query = nearby_query(city, latitude, longitude, limit, radius_km)
        return build_facility_map(directory.find_nearby(query), center=query.coordinate)

    return location_mcp

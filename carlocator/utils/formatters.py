"""Formatting helpers for Google Maps responses and facility listings."""

from carlocator.schemas.facilities import RankedFacility
from carlocator.schemas.location import Coordinate, PlaceCandidate, ResolvedPlace


def _component_name(component: dict) -> str | None:
    # Places API (New) uses longText, the Geocoding API uses long_name.
    return component.get("longText") or component.get("long_name")


def extract_location_parts(components: list[dict]) -> tuple[str | None, str | None, str | None]:
    """Pick city, state and country from address components."""
    city = None
    district = None
    state = None
    country = None

    for component in components:
        types = component.get("types", [])
        name = _component_name(component)
        if not name:
            continue
        if city is None and "locality" in types:
            city = name
        if district is None and "administrative_area_level_2" in types:
            district = name
        if state is None and "administrative_area_level_1" in types:
            state = name
        if country is None and "country" in types:
            country = name

    return city or district, state, country


def format_candidate(suggestion: dict) -> PlaceCandidate | None:
    """Convert an autocomplete suggestion into a PlaceCandidate."""
    prediction = suggestion.get("placePrediction")
    if not prediction or not prediction.get("placeId"):
        return None

    structured = prediction.get("structuredFormat", {})
    description = prediction.get("text", {}).get("text", "")
    primary = structured.get("mainText", {}).get("text") or description
    secondary = structured.get("secondaryText", {}).get("text") or None

    return PlaceCandidate(
        id=prediction["placeId"],
        primary_text=primary,
        secondary_text=secondary,
    )


def format_candidates(suggestions: list[dict]) -> list[PlaceCandidate]:
    """Convert suggestions, skipping query predictions without a place ID."""
    candidates = []
    for suggestion in suggestions:
        candidate = format_candidate(suggestion)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def format_place_details(place: dict) -> ResolvedPlace:
    """Convert a Place Details payload into a ResolvedPlace."""
    city, state, country = extract_location_parts(place.get("addressComponents", []))
    name = place.get("displayName", {}).get("text")
    formatted_address = place.get("formattedAddress")

    location = place.get("location")
    coordinates = None
    if location and "latitude" in location and "longitude" in location:
        coordinates = Coordinate(lat=location["latitude"], lng=location["longitude"])

    return ResolvedPlace(
        city=city or name or formatted_address or "",
        state=state,
        country=country,
        formatted_address=formatted_address or name or "",
        coordinates=coordinates,
    )


def format_reverse_geocode(payload: dict, coordinate: Coordinate) -> ResolvedPlace | None:
    """Convert a reverse geocode payload into a ResolvedPlace.

    Returns None for ZERO_RESULTS and raises ValueError for any other
    non-OK status.
    """
    status = payload.get("status")
    if status == "ZERO_RESULTS":
        return None
    if status != "OK":
        raise ValueError(f"Reverse geocoding failed: {status}")

    results = payload.get("results") or []
    if not results:
        return None

    preferred = next(
        (r for r in results if "locality" in r.get("types", [])),
        results[0],
    )
    city, state, country = extract_location_parts(preferred.get("address_components", []))

    return ResolvedPlace(
        city=city or "",
        state=state,
        country=country,
        formatted_address=preferred.get("formatted_address", ""),
        coordinates=coordinate,
    )


def format_facility(facility: RankedFacility) -> str:
    """Format a facility into a readable multi-line string."""
    lines = [
        f"Name: {facility.name}",
        f"Address: {facility.address}",
    ]
    if facility.phone:
        lines.append(f"Phone: {facility.phone}")
    if facility.hours:
        lines.append(f"Hours: {facility.hours}")
    if facility.distance_km is not None:
        lines.append(f"Distance: {facility.distance_km:.2f} km")
    return "\n".join(lines)

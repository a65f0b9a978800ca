import asyncio

import pytest
from fastmcp import Client

from carlocator.config import settings
from carlocator.schemas.location import (
    Candidates,
    Coordinate,
    Found,
    NotFound,
    PlaceCandidate,
    ProviderError,
    ResolvedPlace,
)
from carlocator.servers.location_server import (
    candidate_response,
    create_location_server,
    nearby_query,
    place_response,
)
from carlocator.services.location_session import (
    CANDIDATE_FAILED_MESSAGE,
    CITY_UNDETERMINED_MESSAGE,
    DETECTION_FAILED_MESSAGE,
    SUGGESTIONS_FAILED_MESSAGE,
)
from carlocator.services.proximity import ProximityDirectory
from carlocator.utils.map_markers import EMPTY_MESSAGE


def test_candidate_response_variants():
    found = candidate_response(
        Candidates(items=[PlaceCandidate(id="a", primary_text="Pune")])
    )
    assert found.count == 1
    assert found.warning is None

    empty = candidate_response(NotFound())
    assert empty.count == 0
    assert empty.warning is None

    failed = candidate_response(ProviderError(message="HTTP 500"))
    assert failed.candidates == []
    assert failed.warning == SUGGESTIONS_FAILED_MESSAGE


def test_place_response_variants():
    pune = ResolvedPlace(city="Pune", formatted_address="Pune, India")
    assert place_response(Found(place=pune), CANDIDATE_FAILED_MESSAGE).place == pune

    blank = ResolvedPlace(city="", formatted_address="Somewhere")
    rejected = place_response(Found(place=blank), CANDIDATE_FAILED_MESSAGE)
    assert rejected.place is None
    assert rejected.warning == CITY_UNDETERMINED_MESSAGE

    missing = place_response(NotFound(), CANDIDATE_FAILED_MESSAGE)
    assert missing.place is None
    assert missing.warning == CANDIDATE_FAILED_MESSAGE


def test_nearby_query_needs_both_coordinates():
    query = nearby_query("  ", 18.5, None, 6, 75.0)
    assert query.city is None
    assert query.coordinate is None

    query = nearby_query("Pune", 18.5, 73.8, 3, 20.0)
    assert query.city == "Pune"
    assert query.coordinate == Coordinate(lat=18.5, lng=73.8)
    assert query.limit == 3
    assert query.radius_km == 20.0


# ---------------------------------------------------------------------------
# Tools called through an in-memory client
# ---------------------------------------------------------------------------


def _call(server, tool: str, arguments: dict) -> dict:
    async def scenario():
        async with Client(server) as client:
            result = await client.call_tool(tool, arguments)
            return result.structured_content

    return asyncio.run(scenario())


@pytest.fixture
def server(gateway):
    return create_location_server(gateway, ProximityDirectory())


def test_tools_are_registered(server):
    async def scenario():
        async with Client(server) as client:
            return {t.name for t in await client.list_tools()}

    assert asyncio.run(scenario()) == {
        "suggest_cities",
        "resolve_city",
        "locate_coordinates",
        "find_service_centers",
        "service_centers_map",
    }


def test_suggest_cities_returns_candidates(server, gateway):
    gateway.forward_results["Pun"] = Candidates(
        items=[PlaceCandidate(id="id-pune", primary_text="Pune", secondary_text="India")]
    )
    data = _call(server, "suggest_cities", {"query": "Pun"})
    assert gateway.forward_calls == ["Pun"]
    assert data["count"] == 1
    assert data["candidates"][0]["id"] == "id-pune"
    assert data["warning"] is None


def test_suggest_cities_provider_error_is_a_warning(server, gateway):
    gateway.forward_results["Pun"] = ProviderError(message="HTTP 503")
    data = _call(server, "suggest_cities", {"query": "Pun"})
    assert data["count"] == 0
    assert data["candidates"] == []
    assert data["warning"] == SUGGESTIONS_FAILED_MESSAGE


def test_resolve_city_found(server, gateway):
    gateway.resolve_result = Found(
        place=ResolvedPlace(
            city="Pune",
            formatted_address="Pune, Maharashtra, India",
            coordinates=Coordinate(lat=18.5204, lng=73.8567),
        )
    )
    data = _call(server, "resolve_city", {"place_id": "id-pune"})
    assert gateway.resolve_calls == ["id-pune"]
    assert data["place"]["city"] == "Pune"
    assert data["place"]["coordinates"] == {"lat": 18.5204, "lng": 73.8567}
    assert data["warning"] is None


def test_resolve_city_blank_city_is_rejected(server, gateway):
    gateway.resolve_result = Found(place=ResolvedPlace(city="  ", formatted_address="Highway"))
    data = _call(server, "resolve_city", {"place_id": "id-highway"})
    assert data["place"] is None
    assert data["warning"] == CITY_UNDETERMINED_MESSAGE


def test_resolve_city_provider_error(server, gateway):
    gateway.resolve_result = ProviderError(message="HTTP 500")
    data = _call(server, "resolve_city", {"place_id": "id-pune"})
    assert data["place"] is None
    assert data["warning"] == CANDIDATE_FAILED_MESSAGE


def test_locate_coordinates_not_found(server, gateway):
    data = _call(server, "locate_coordinates", {"latitude": 18.53, "longitude": 73.85})
    assert gateway.reverse_calls == [Coordinate(lat=18.53, lng=73.85)]
    assert data["place"] is None
    assert data["warning"] == DETECTION_FAILED_MESSAGE


def test_find_service_centers_lists_city_first(server):
    data = _call(
        server,
        "find_service_centers",
        {"city": "Pune", "latitude": 18.53865, "longitude": 73.89337, "radius_km": 200},
    )
    ids = [f["id"] for f in data["facilities"]]
    assert ids == ["pune-hinjewadi", "pune-koregaon", "mumbai-nerul", "mumbai-andheri"]
    assert data["count"] == 4


def test_find_service_centers_uses_configured_defaults(server, monkeypatch):
    monkeypatch.setattr(settings, "NEARBY_DEFAULT_LIMIT", 1)
    data = _call(server, "find_service_centers", {"city": "Mumbai"})
    assert [f["id"] for f in data["facilities"]] == ["mumbai-andheri"]


def test_service_centers_map_builds_markers_and_viewport(server):
    data = _call(server, "service_centers_map", {"city": "Mumbai"})
    assert data["count"] == 2
    assert [m["kind"] for m in data["markers"]] == ["service", "pickup"]
    assert data["viewport"]["padding"] == 72
    assert data["viewport"]["empty_message"] is None


def test_service_centers_map_empty_centers_on_query(server):
    data = _call(
        server,
        "service_centers_map",
        {"city": "Jaipur", "latitude": 26.9124, "longitude": 75.7873, "radius_km": 10},
    )
    assert data["markers"] == []
    assert data["viewport"]["center"] == {"lat": 26.9124, "lng": 75.7873}
    assert data["viewport"]["empty_message"] == EMPTY_MESSAGE

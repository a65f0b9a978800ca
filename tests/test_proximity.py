import pytest

from carlocator.data.service_centers import SERVICE_CENTERS
from carlocator.schemas.facilities import Facility, NearbyQuery
from carlocator.schemas.location import Coordinate, ResolvedPlace
from carlocator.services.geometry import distance_km
from carlocator.services.proximity import ProximityDirectory, find_nearby

KOREGAON = Coordinate(lat=18.53865, lng=73.89337)


def _facility(id: str, city: str, lat: float, lng: float, kind: str = "service") -> Facility:
    return Facility(
        id=id,
        name=f"Facility {id}",
        address=f"{id} road",
        city=city,
        position=Coordinate(lat=lat, lng=lng),
        kind=kind,
    )


def _ids(results) -> list[str]:
    return [f.id for f in results]


@pytest.fixture
def directory():
    return ProximityDirectory()


def test_city_only_returns_city_matches_without_distance(directory):
    results = directory.find_nearby(NearbyQuery(city="Mumbai", coordinate=None, limit=6))
    assert _ids(results) == ["mumbai-andheri", "mumbai-nerul"]
    assert all(f.city == "Mumbai" for f in results)
    assert all(f.distance_km is None for f in results)


def test_city_match_ignores_case_and_padding(directory):
    results = directory.find_nearby(NearbyQuery(city="  mUmBaI "))
    assert _ids(results) == ["mumbai-andheri", "mumbai-nerul"]


def test_city_match_is_exact_not_substring(directory):
    assert directory.find_nearby(NearbyQuery(city="Delhi")) == []
    assert _ids(directory.find_nearby(NearbyQuery(city="new delhi"))) == [
        "delhi-okhla",
        "delhi-janakpuri",
    ]


def test_no_city_and_no_coordinate_is_empty(directory):
    assert directory.find_nearby(NearbyQuery(city=None, coordinate=None)) == []


def test_empty_catalog_is_empty():
    directory = ProximityDirectory(catalog=[])
    assert directory.find_nearby(NearbyQuery(city="Pune", coordinate=KOREGAON)) == []


def test_limit_truncates_city_matches_in_catalog_order(directory):
    results = directory.find_nearby(NearbyQuery(city="Mumbai", limit=1))
    assert _ids(results) == ["mumbai-andheri"]


def test_non_positive_limit_is_empty(directory):
    assert directory.find_nearby(NearbyQuery(city="Mumbai", limit=0)) == []
    assert directory.find_nearby(NearbyQuery(city="Mumbai", limit=-3)) == []


def test_city_matches_keep_catalog_order_and_get_distances(directory):
    results = directory.find_nearby(NearbyQuery(city="Pune", coordinate=KOREGAON))
    # Hinjewadi is farther from Koregaon Park but comes first in the catalog.
    assert _ids(results) == ["pune-hinjewadi", "pune-koregaon"]
    assert results[0].distance_km > results[1].distance_km
    assert results[1].distance_km == 0


def test_city_matches_then_nearest_without_duplicates(directory):
    results = directory.find_nearby(
        NearbyQuery(city="Pune", coordinate=KOREGAON, limit=6, radius_km=200)
    )
    assert _ids(results) == [
        "pune-hinjewadi",
        "pune-koregaon",
        "mumbai-nerul",
        "mumbai-andheri",
    ]
    assert len(set(_ids(results))) == len(results)


def test_pune_fill_with_four_nearest_others():
    center = Coordinate(lat=19.0, lng=73.0)
    # Ten facilities due north of the center at 0.05 degree steps (~5.6 km each),
    # listed out of distance order.
    order = [7, 3, 9, 1, 5, 2, 10, 4, 8, 6]
    others = [_facility(f"other-{k}", "Elsewhere", 19.0 + 0.05 * k, 73.0) for k in order]
    pune = [
        _facility("pune-a", "Pune", 18.52, 73.85),
        _facility("pune-b", "Pune", 18.50, 73.90, kind="pickup"),
    ]
    catalog = others[:5] + [pune[0]] + others[5:] + [pune[1]]
    directory = ProximityDirectory(catalog=catalog)

    results = directory.find_nearby(
        NearbyQuery(city="Pune", coordinate=center, limit=6, radius_km=75)
    )

    assert len(results) == 6
    assert _ids(results) == [
        "pune-a",
        "pune-b",
        "other-1",
        "other-2",
        "other-3",
        "other-4",
    ]
    # Pune entries are admitted even though they lie outside the radius.
    assert all(f.distance_km > 75 for f in results[:2])
    tail = [f.distance_km for f in results[2:]]
    assert tail == sorted(tail)
    assert all(d <= 75 for d in tail)


def test_coordinate_only_filters_by_radius(directory):
    results = directory.find_nearby(NearbyQuery(coordinate=KOREGAON, radius_km=25))
    assert _ids(results) == ["pune-koregaon", "pune-hinjewadi"]
    assert results[0].distance_km <= results[1].distance_km <= 25


def test_equal_distances_keep_catalog_order():
    center = Coordinate(lat=10.0, lng=10.0)
    catalog = [
        _facility("b", "X", 10.1, 10.0),
        _facility("a", "Y", 10.1, 10.0),
        _facility("near", "Z", 10.05, 10.0),
    ]
    results = ProximityDirectory(catalog=catalog).find_nearby(NearbyQuery(coordinate=center))
    assert _ids(results) == ["near", "b", "a"]


def test_city_matches_never_radius_filtered(directory):
    far_away = Coordinate(lat=28.6, lng=77.2)
    results = directory.find_nearby(NearbyQuery(city="Pune", coordinate=far_away, radius_km=10))
    assert _ids(results)[:2] == ["pune-hinjewadi", "pune-koregaon"]
    assert all(f.distance_km > 10 for f in results[:2])


def test_results_are_fresh_copies(directory):
    first = directory.find_nearby(NearbyQuery(city="Pune", coordinate=KOREGAON))
    second = directory.find_nearby(NearbyQuery(city="Pune"))
    assert first[0].distance_km is not None
    assert second[0].distance_km is None


def test_by_city_and_all(directory):
    assert directory.all() == SERVICE_CENTERS
    assert _ids(directory.by_city("Hyderabad")) == ["hyderabad-hitech", "hyderabad-banjara"]
    assert directory.by_city(None) == []
    assert directory.by_city("   ") == []


def test_near_respects_limit_and_exclusions(directory):
    results = directory.near(KOREGAON, limit=1, radius_km=500, exclude={"pune-koregaon"})
    assert _ids(results) == ["pune-hinjewadi"]
    assert results[0].distance_km == distance_km(KOREGAON, results[0].position)


def test_query_from_resolved_place(directory):
    place = ResolvedPlace(
        city="Bengaluru",
        formatted_address="Bengaluru, Karnataka, India",
        coordinates=Coordinate(lat=12.9716, lng=77.5946),
    )
    query = NearbyQuery.from_place(place, limit=4)
    assert query.limit == 4
    assert query.radius_km == 75
    results = directory.find_nearby(query)
    assert _ids(results) == ["bengaluru-krpuram", "bengaluru-btm"]


def test_module_level_find_nearby_uses_defaults():
    results = find_nearby(city="Hyderabad")
    assert _ids(results) == ["hyderabad-hitech", "hyderabad-banjara"]
    assert find_nearby() == []

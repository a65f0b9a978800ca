"""
Proximity directory.

Ranks catalog facilities against a resolved place:

    1. City matches (case-insensitive, trimmed, exact) in catalog order,
       annotated with distance when a coordinate is known. City matches
       are never radius-filtered.
    2. If fewer than `limit`, fill with the nearest other facilities
       within `radius_km` of the coordinate, ascending by distance (stable
       on catalog order), skipping ids already present.

Queries are pure and synchronous; they never raise on a missing city,
missing coordinate or empty catalog.
"""

from typing import Iterable

from carlocator.config import settings
from carlocator.data.service_centers import SERVICE_CENTERS
from carlocator.schemas.facilities import Facility, NearbyQuery, RankedFacility
from carlocator.schemas.location import Coordinate
from carlocator.services.geometry import distance_km


def _normalize(value: str | None) -> str:
    return value.strip().lower() if value else ""


def _rank(facility: Facility, coordinate: Coordinate | None) -> RankedFacility:
    distance = distance_km(coordinate, facility.position) if coordinate is not None else None
    return RankedFacility.model_validate({**facility.model_dump(), "distance_km": distance})


class ProximityDirectory:
    """Read-only facility catalog with city and distance queries."""

    def __init__(self, catalog: Iterable[Facility] | None = None) -> None:
        self._catalog: tuple[Facility, ...] = tuple(
            SERVICE_CENTERS if catalog is None else catalog
        )

    def all(self) -> tuple[Facility, ...]:
        return self._catalog

    def by_city(self, city: str | None) -> list[Facility]:
        """Facilities whose city equals `city`, ignoring case and padding."""
        normalized = _normalize(city)
        if not normalized:
            return []
        return [f for f in self._catalog if _normalize(f.city) == normalized]

    def near(
        self,
        coordinate: Coordinate,
        limit: int | None = None,
        radius_km: float | None = None,
        exclude: set[str] | None = None,
    ) -> list[RankedFacility]:
        """Facilities within `radius_km` of `coordinate`, nearest first."""
        if limit is None:
            limit = settings.NEARBY_DEFAULT_LIMIT
        if radius_km is None:
            radius_km = settings.NEARBY_DEFAULT_RADIUS_KM
        if limit <= 0:
            return []

        exclude = exclude or set()
        ranked = [
            _rank(f, coordinate) for f in self._catalog if f.id not in exclude
        ]
        within = [f for f in ranked if f.distance_km <= radius_km]
        # sorted() is stable, so equal distances keep catalog order.
        within = sorted(within, key=lambda f: f.distance_km)
        return within[:limit]

    def find_nearby(self, query: NearbyQuery) -> list[RankedFacility]:
        """City matches first, then nearest facilities, bounded by `query.limit`."""
        if query.limit <= 0:
            return []

        city_matches = [_rank(f, query.coordinate) for f in self.by_city(query.city)]
        if len(city_matches) >= query.limit:
            return city_matches[:query.limit]

        if query.coordinate is None:
            return city_matches

        nearest = self.near(
            query.coordinate,
            limit=query.limit - len(city_matches),
            radius_km=query.radius_km,
            exclude={f.id for f in city_matches},
        )
        return (city_matches + nearest)[:query.limit]


_default_directory: ProximityDirectory | None = None


def get_directory() -> ProximityDirectory:
    """Return the shared directory over the built-in catalog."""
    global _default_directory
    if _default_directory is None:
        _default_directory = ProximityDirectory()
    return _default_directory


def find_nearby(
    city: str | None = None,
    coordinate: Coordinate | None = None,
    limit: int | None = None,
    radius_km: float | None = None,
) -> list[RankedFacility]:
    """Query the built-in catalog; see ProximityDirectory.find_nearby."""
    kwargs: dict = {"city": city, "coordinate": coordinate}
    if limit is not None:
        kwargs["limit"] = limit
    if radius_km is not None:
        kwargs["radius_km"] = radius_km
    return get_directory().find_nearby(NearbyQuery(**kwargs))

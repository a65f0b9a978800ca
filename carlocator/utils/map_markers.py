"""Marker and viewport data for rendering ranked facilities on a map."""

from pydantic import BaseModel, Field

from carlocator.schemas.facilities import FacilityKind, RankedFacility
from carlocator.schemas.location import Coordinate
from carlocator.utils.formatters import format_facility

INDIA_CENTER = Coordinate(lat=20.5937, lng=78.9629)
DEFAULT_ZOOM = 12
BOUNDS_PADDING_PX = 72
EMPTY_MESSAGE = "No nearby service locations to display."


class MarkerStyle(BaseModel):
    scale: int
    stroke_color: str
    fill_color: str
    stroke_weight: int = 2
    fill_opacity: float = 0.9


MARKER_STYLES: dict[str, MarkerStyle] = {
    "service": MarkerStyle(scale=8, stroke_color="#1d4ed8", fill_color="#60a5fa"),
    "pickup": MarkerStyle(scale=6, stroke_color="#f97316", fill_color="#fb923c"),
}


class MapMarker(BaseModel):
    id: str = Field(description="Facility ID.")
    position: Coordinate = Field(description="Marker position.")
    title: str = Field(description="Tooltip title.")
    kind: FacilityKind = Field(description="Facility kind.")
    style: MarkerStyle = Field(description="Symbol style for the marker kind.")
    info: str = Field(description="Info window text.")


class Bounds(BaseModel):
    south_west: Coordinate
    north_east: Coordinate


class MapViewport(BaseModel):
    center: Coordinate | None = Field(None, description="Center when not fitting bounds.")
    zoom: int | None = Field(None, description="Zoom level, None when bounds decide it.")
    bounds: Bounds | None = Field(None, description="Area to fit all markers into.")
    padding: int | None = Field(None, description="Bounds padding in pixels.")
    empty_message: str | None = Field(None, description="Overlay text when there are no markers.")


def build_markers(facilities: list[RankedFacility]) -> list[MapMarker]:
    return [
        MapMarker(
            id=f.id,
            position=f.position,
            title=f.name,
            kind=f.kind,
            style=MARKER_STYLES[f.kind],
            info=format_facility(f),
        )
        for f in facilities
    ]


def _bounds(positions: list[Coordinate]) -> Bounds:
    return Bounds(
        south_west=Coordinate(
            lat=min(p.lat for p in positions),
            lng=min(p.lng for p in positions),
        ),
        north_east=Coordinate(
            lat=max(p.lat for p in positions),
            lng=max(p.lng for p in positions),
        ),
    )


def build_viewport(
    facilities: list[RankedFacility],
    center: Coordinate | None = None,
    fallback_center: Coordinate | None = None,
    zoom: int = DEFAULT_ZOOM,
) -> MapViewport:
    """Decide what part of the map to show for a set of facilities.

    Several markers are fitted into bounds with padding. A single marker is
    fitted without padding at the requested zoom. Without markers the map
    centers on `center`, then `fallback_center`, then India.
    """
    if not facilities:
        return MapViewport(
            center=center or fallback_center or INDIA_CENTER,
            zoom=zoom,
            empty_message=EMPTY_MESSAGE,
        )

    bounds = _bounds([f.position for f in facilities])
    if len(facilities) == 1:
        return MapViewport(bounds=bounds, zoom=zoom)
    return MapViewport(bounds=bounds, padding=BOUNDS_PADDING_PX)


class FacilityMapResponse(BaseModel):
    count: int = Field(description="Number of facilities on the map.")
    markers: list[MapMarker] = Field(description="One marker per facility, in display order.")
    viewport: MapViewport = Field(description="What part of the map to show.")


def build_facility_map(
    facilities: list[RankedFacility],
    center: Coordinate | None = None,
) -> FacilityMapResponse:
    return FacilityMapResponse(
        count=len(facilities),
        markers=build_markers(facilities),
        viewport=build_viewport(facilities, center=center),
    )

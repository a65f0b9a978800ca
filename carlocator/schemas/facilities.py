"""Pydantic models for the facility catalog and proximity queries."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from carlocator.config import settings
from carlocator.schemas.location import Coordinate, ResolvedPlace

FacilityKind = Literal["service", "pickup"]


class Facility(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable catalog identifier.")
    name: str = Field(description="Display name of the facility.")
    address: str = Field(description="Street address.")
    city: str = Field(description="City the facility belongs to.")
    position: Coordinate = Field(description="Geographic coordinates.")
    kind: FacilityKind = Field(description="Service center or pickup point.")
    phone: str | None = Field(None, description="Contact phone number.")
    hours: str | None = Field(None, description="Opening hours.")


class RankedFacility(Facility):
    distance_km: float | None = Field(
        None,
        description="Distance from the query coordinate, None when no coordinate was given.",
    )


class NearbyQuery(BaseModel):
    city: str | None = Field(None, description="City to match exactly (case-insensitive).")
    coordinate: Coordinate | None = Field(None, description="Reference point for distance ranking.")
    limit: int = Field(
        default_factory=lambda: settings.NEARBY_DEFAULT_LIMIT,
        description="Maximum number of facilities to return.",
    )
    radius_km: float = Field(
        default_factory=lambda: settings.NEARBY_DEFAULT_RADIUS_KM,
        description="Radius for nearest-facility matches.",
    )

    @classmethod
    def from_place(
        cls,
        place: ResolvedPlace,
        limit: int | None = None,
        radius_km: float | None = None,
    ) -> "NearbyQuery":
        kwargs: dict = {"city": place.city, "coordinate": place.coordinates}
        if limit is not None:
            kwargs["limit"] = limit
        if radius_km is not None:
            kwargs["radius_km"] = radius_km
        return cls(**kwargs)


class NearbyFacilitiesResponse(BaseModel):
    count: int = Field(description="Number of facilities returned.")
    facilities: list[RankedFacility] = Field(description="Facilities ordered for display.")

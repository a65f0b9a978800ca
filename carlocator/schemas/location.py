"""Pydantic models for place lookups and the tagged provider results."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0, description="Latitude in decimal degrees.")
    lng: float = Field(ge=-180.0, le=180.0, description="Longitude in decimal degrees.")


class PlaceCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Provider place ID used to resolve the candidate.")
    primary_text: str = Field(description="Main label, usually the city name.")
    secondary_text: str | None = Field(None, description="Qualifier such as state and country.")


class ResolvedPlace(BaseModel):
    city: str = Field(description="City name. Must be non-empty for a valid selection.")
    state: str | None = Field(None, description="State or first-level administrative area.")
    country: str | None = Field(None, description="Country name.")
    formatted_address: str = Field(description="Human-readable address for display.")
    coordinates: Coordinate | None = Field(None, description="Location, or None for manual entries.")

    @property
    def is_valid(self) -> bool:
        return bool(self.city.strip())

    @property
    def label(self) -> str:
        return self.formatted_address or self.city


# --- Tagged lookup results ---


class Candidates(BaseModel):
    kind: Literal["candidates"] = "candidates"
    items: list[PlaceCandidate] = Field(default_factory=list)


class Found(BaseModel):
    kind: Literal["found"] = "found"
    place: ResolvedPlace


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"


class ProviderError(BaseModel):
    kind: Literal["provider_error"] = "provider_error"
    message: str


CandidateLookup = Annotated[
    Union[Candidates, NotFound, ProviderError],
    Field(discriminator="kind"),
]
PlaceLookup = Annotated[
    Union[Found, NotFound, ProviderError],
    Field(discriminator="kind"),
]


# --- Tool responses ---


class CandidateSearchResponse(BaseModel):
    count: int = Field(description="Number of candidates returned.")
    candidates: list[PlaceCandidate] = Field(description="City suggestions for the query.")
    warning: str | None = Field(None, description="Advisory message when the provider failed.")


class PlaceResolutionResponse(BaseModel):
    place: ResolvedPlace | None = Field(None, description="Resolved place, if any.")
    warning: str | None = Field(None, description="Advisory message when nothing was resolved.")

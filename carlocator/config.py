from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Google Maps ---
    GOOGLE_MAPS_API_KEY: str = Field(
        default="",
        description="API key for Places API (New) and the Geocoding API. Empty disables lookups.",
    )
    GOOGLE_MAPS_LANGUAGE: str = Field(
        default="en",
        description="Language code for provider responses.",
    )
    GOOGLE_MAPS_REGION: str = Field(
        default="IN",
        description="Region code used to bias provider responses.",
    )
    GEOCODING_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="HTTP timeout for geocoding provider calls.",
    )

    # --- Location session ---
    LOCATION_DEBOUNCE_MS: int = Field(
        default=300,
        description="Quiet interval after the last keystroke before a suggestion lookup.",
    )
    LOCATION_MIN_QUERY_LENGTH: int = Field(
        default=2,
        description="Minimum trimmed input length that may trigger a lookup.",
    )
    GEOLOCATION_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Upper bound on a device position request.",
    )

    # --- Proximity directory ---
    NEARBY_DEFAULT_LIMIT: int = Field(
        default=6,
        description="Default number of facilities returned by a proximity query.",
    )
    NEARBY_DEFAULT_RADIUS_KM: float = Field(
        default=75.0,
        description="Default search radius in kilometres for nearest facilities.",
    )

    # --- Observability ---
    OTEL_SERVICE_NAME: str = Field(
        default="carlocator",
        description="Service name used for the OpenTelemetry tracer.",
    )
    OBSERVABILITY_ENABLED: bool = Field(
        default=True,
        description="Emit OpenTelemetry spans around provider calls and tools.",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum level for the loguru stderr sink.",
    )


settings = Settings()

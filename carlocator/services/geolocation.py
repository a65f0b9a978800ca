"""
Device geolocation contract.

A PositionProvider supplies the current device coordinate. Providers
report failures only through GeolocationError; the location session maps
each error code to a fixed user-facing message and never retries.
"""

from enum import Enum
from typing import Protocol

from carlocator.schemas.location import Coordinate


class GeolocationErrorCode(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class GeolocationError(Exception):
    def __init__(self, code: GeolocationErrorCode, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.value}: {detail}" if detail else code.value)


GEOLOCATION_MESSAGES = {
    GeolocationErrorCode.PERMISSION_DENIED: (
        "Permission denied. Please allow location access in your browser settings."
    ),
    GeolocationErrorCode.POSITION_UNAVAILABLE: "Location information is unavailable right now.",
    GeolocationErrorCode.TIMEOUT: "Location request timed out. Try again.",
    GeolocationErrorCode.UNSUPPORTED: "Geolocation is not supported on this device.",
}
GENERIC_GEOLOCATION_MESSAGE = "We couldn't access your location."


def geolocation_message(code: GeolocationErrorCode | None) -> str:
    """User-facing warning for a geolocation failure."""
    if code is None:
        return GENERIC_GEOLOCATION_MESSAGE
    return GEOLOCATION_MESSAGES.get(code, GENERIC_GEOLOCATION_MESSAGE)


class PositionProvider(Protocol):
    async def get_current_position(self) -> Coordinate: ...


class StaticPositionProvider:
    """Always reports the same coordinate (fixed kiosks, server-side callers)."""

    def __init__(self, coordinate: Coordinate) -> None:
        self._coordinate = coordinate

    async def get_current_position(self) -> Coordinate:
        return self._coordinate


class UnsupportedPositionProvider:
    """Provider for environments without any positioning capability."""

    async def get_current_position(self) -> Coordinate:
        raise GeolocationError(GeolocationErrorCode.UNSUPPORTED)

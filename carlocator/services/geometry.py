"""
Distance calculations for location services.

Haversine formula for great-circle distance between two coordinates.
Used to rank facilities against a resolved place.
"""

import math

from carlocator.schemas.location import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates in kilometres.

    The result is rounded to 2 decimals, half away from zero.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    h = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    # Distance is never negative, so floor(x + 0.5) rounds half away from zero.
    return math.floor(EARTH_RADIUS_KM * c * 100 + 0.5) / 100

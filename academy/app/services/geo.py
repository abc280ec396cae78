"""Great-circle distance helpers for the attendance geofence."""

import math

from academy.app.core.settings import AcademyLocation

EARTH_RADIUS_METERS = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two lat/lon points, rounded to 2 decimals."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Clamp floating error so asin never sees a value above 1
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return round(EARTH_RADIUS_METERS * c, 2)


def validate_coordinates(latitude, longitude) -> bool:
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False
    if math.isnan(latitude) or math.isnan(longitude):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def distance_from_academy(location: AcademyLocation, latitude: float, longitude: float) -> float:
    return haversine_distance(location.latitude, location.longitude, latitude, longitude)


def is_within_academy(location: AcademyLocation, latitude: float, longitude: float) -> tuple[bool, float]:
    distance = distance_from_academy(location, latitude, longitude)
    return distance <= location.radius_meters, distance

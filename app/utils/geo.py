# app/utils/geo.py
import math
from typing import Optional

EARTH_RADIUS_KM = 6371


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometers."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_if_within(
    lat: float,
    lon: float,
    target_lat: Optional[float],
    target_lon: Optional[float],
    max_distance_km: float,
) -> Optional[float]:
    """Distance to the target when it has coordinates and lies within range, else None."""
    if target_lat is None or target_lon is None:
        return None
    distance = haversine_km(lat, lon, target_lat, target_lon)
    return distance if distance <= max_distance_km else None

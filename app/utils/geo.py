import math
from typing import List, Tuple

EARTH_RADIUS_METERS = 6_371_000


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters"""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def bounding_box(lat: float, lng: float, radius_meters: float) -> Tuple[float, float, float, float]:
    """(min_lat, max_lat, min_lng, max_lng) enclosing a circle; used as a SQL prefilter"""
    d_lat = math.degrees(radius_meters / EARTH_RADIUS_METERS)
    cos_lat = math.cos(math.radians(lat))
    d_lng = 180.0 if abs(cos_lat) < 1e-12 else min(180.0, d_lat / cos_lat)
    return lat - d_lat, lat + d_lat, lng - d_lng, lng + d_lng


def longitude_ranges(min_lng: float, max_lng: float) -> List[Tuple[float, float]]:
    """Split a longitude span that crosses the antimeridian into in-range pieces"""
    if max_lng - min_lng >= 360:
        return [(-180.0, 180.0)]
    if min_lng < -180:
        return [(min_lng + 360, 180.0), (-180.0, max_lng)]
    if max_lng > 180:
        return [(min_lng, 180.0), (-180.0, max_lng - 360)]
    return [(min_lng, max_lng)]

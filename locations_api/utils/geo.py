import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_KM / 180.0

@dataclass
class BBox:
    west: float
    south: float
    east: float
    north: float

def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two points in decimal degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # float error can push a slightly past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

def is_valid_coordinate(lat, lon) -> bool:
    return (
        math.isfinite(lat) and math.isfinite(lon)
        and -90.0 <= lat <= 90.0
        and -180.0 <= lon <= 180.0
    )

def bounding_box(lat: float, lon: float, radius_km: float) -> BBox | None:
    """
    Rectangle enclosing the circle of radius_km around (lat, lon), for a coarse
    SQL pre-filter. None when the box would wrap a pole or the antimeridian;
    callers then skip the pre-filter and rely on the exact distance check.
    """
    dlat = radius_km / KM_PER_DEGREE_LAT
    south, north = lat - dlat, lat + dlat
    if south < -90.0 or north > 90.0:
        return None
    # widest longitude span is at the latitude edge closest to a pole
    edge_lat = max(abs(south), abs(north))
    cos_edge = math.cos(math.radians(edge_lat))
    if cos_edge <= 0:
        return None
    dlon = dlat / cos_edge
    west, east = lon - dlon, lon + dlon
    if west < -180.0 or east > 180.0:
        return None
    return BBox(west=west, south=south, east=east, north=north)

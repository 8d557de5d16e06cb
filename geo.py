from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0
KM_PER_MILE = 1.609344


def haversine_km(lat1, lon1, lat2, lon2):
    """Calculate distance (km) between two lat/lon points."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = (
        sin(dlat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    )
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_miles(lat1, lon1, lat2, lon2):
    return haversine_km(lat1, lon1, lat2, lon2) / KM_PER_MILE

import math

import numpy as np

EARTH_RADIUS_MI = 3963.0


def distance(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle (haversine) distance in miles."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2.0) ** 2
    a += math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    # clamp rounding noise so sqrt(1 - a) stays real
    if a > 1.0:
        a = 1.0
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_MI * c


def bearing(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Initial bearing in degrees, (-180, 180], following the great circle from 1 to 2."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlambda = math.radians(lon2 - lon1)

    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    deg = math.degrees(math.atan2(y, x))
    # atan2 yields -180 for a signed-zero y; keep the half-open range
    return 180.0 if deg == -180.0 else deg


def distances(lon: float, lat: float, lons: np.ndarray, lats: np.ndarray) -> np.ndarray:
    """Vectorized haversine from one point to many, in miles."""
    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    dphi = np.radians(lats - lat)
    dlambda = np.radians(lons - lon)

    a = np.sin(dphi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2.0) ** 2
    a = np.minimum(a, 1.0)
    return EARTH_RADIUS_MI * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))

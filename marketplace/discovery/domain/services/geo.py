"""
Great-circle distance between two coordinates.

Missing coordinates are normal (sellers who never set a shop location), so
``distance_km`` answers NaN for them instead of raising. NaN compares false
against any radius, which keeps such sellers out of radius filters.
"""

import math
from typing import Optional


EARTH_RADIUS_KM = 6371.0


def _as_float(value) -> float:
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def distance_km(
    lat1: Optional[float], lon1: Optional[float], lat2: Optional[float], lon2: Optional[float]
) -> float:
    """
    Haversine distance in kilometres.

    Example:
        >>> distance_km(12.9716, 77.5946, 12.9716, 77.5946)
        0.0
    """
    coords = [_as_float(v) for v in (lat1, lon1, lat2, lon2)]
    if any(math.isnan(c) for c in coords):
        return math.nan

    phi1, lambda1, phi2, lambda2 = (math.radians(c) for c in coords)
    d_phi = phi2 - phi1
    d_lambda = lambda2 - lambda1

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a past 1.0 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))

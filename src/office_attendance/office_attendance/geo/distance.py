"""Great-circle distance between two coordinates.

Haversine on a spherical Earth (mean radius 6,371 km). The error against an
ellipsoidal model stays within about 0.5%, enough for office radii of tens to
thousands of meters.
"""

from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_M


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between (lat1, lon1) and (lat2, lon2), in degrees."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c

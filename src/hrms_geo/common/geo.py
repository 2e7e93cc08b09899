from __future__ import annotations

import math
from typing import Iterable, Tuple

from ..core.constants import EARTH_RADIUS_M


def haversine_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres between two lat/lng points."""

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def path_distance_m(points: Iterable[Tuple[float, float]]) -> float:
    total = 0.0
    prev = None
    for point in points:
        if prev is not None:
            total += haversine_distance_m(prev[0], prev[1], point[0], point[1])
        prev = point
    return total

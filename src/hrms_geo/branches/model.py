from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.geo import haversine_distance_m


@dataclass(frozen=True)
class Geofence:
    """Branch-centred circle used to decide in-office presence."""

    enabled: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_m: Optional[int] = None

    @property
    def usable(self) -> bool:
        return self.enabled and self.latitude is not None and self.longitude is not None

    def effective_radius(self, default_radius_m: int) -> int:
        return int(self.radius_m) if self.radius_m else default_radius_m

    def distance_m(self, lat: float, lng: float) -> Optional[float]:
        if not self.usable:
            return None
        return haversine_distance_m(self.latitude, self.longitude, lat, lng)

    def contains(self, lat: float, lng: float, *, default_radius_m: int) -> bool:
        distance = self.distance_m(lat, lng)
        return distance is not None and distance <= self.effective_radius(default_radius_m)


@dataclass(frozen=True)
class Branch:
    branch_id: int
    company_id: int
    branch_name: str
    geofence: Geofence = field(default_factory=Geofence)

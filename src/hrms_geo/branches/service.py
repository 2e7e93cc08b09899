from __future__ import annotations

from typing import Optional

from ..core.enums import PresenceStatus
from .model import Geofence
from .repository import BranchRepository


class BranchService:
    """Geofence lookups for presence decisions."""

    def __init__(self, branches: BranchRepository):
        self._branches = branches

    def geofence_for(self, branch_id: Optional[int]) -> Optional[Geofence]:
        if not branch_id:
            return None
        branch = self._branches.get_by_id(branch_id)
        return branch.geofence if branch else None

    def office_status(self, branch_id: Optional[int], lat: float, lng: float, *, default_radius_m: int) -> PresenceStatus:
        geofence = self.geofence_for(branch_id)
        if geofence and geofence.contains(lat, lng, default_radius_m=default_radius_m):
            return PresenceStatus.IN_OFFICE
        return PresenceStatus.OUT_OF_OFFICE

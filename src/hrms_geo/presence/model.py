from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat_utc
from ..core.enums import PresenceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PresenceRecord:
    """One location sample for a staff member outside of any task.

    Records are append-only: created per ping, never updated.
    """

    presence_id: int
    staff_id: int
    company_id: int
    latitude: float
    longitude: float
    presence_status: PresenceStatus
    timestamp: datetime
    staff_name: Optional[str] = None
    accuracy: Optional[float] = None
    battery_percent: Optional[float] = None
    movement_type: Optional[str] = None
    address: Optional[str] = None
    full_address: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    pincode: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.presence_id,
            "staffId": self.staff_id,
            "staffName": self.staff_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "batteryPercent": self.battery_percent,
            "movementType": self.movement_type,
            "address": self.address,
            "fullAddress": self.full_address,
            "city": self.city,
            "area": self.area,
            "pincode": self.pincode,
            "presenceStatus": self.presence_status.value,
            "timestamp": isoformat_utc(self.timestamp),
        }


def coerce_status(value: Any) -> PresenceStatus:
    try:
        return PresenceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in PresenceStatus)
        raise ValidationError(f"presenceStatus must be one of: {allowed}")


def storable_presence_status(value: Any) -> PresenceStatus:
    """Presence rows may only be in_office or out_of_office; task pings live in task_tracking."""

    status = coerce_status(value)
    if status == PresenceStatus.TASK:
        raise ValidationError("Task pings are stored as task tracking, not presence")
    return status

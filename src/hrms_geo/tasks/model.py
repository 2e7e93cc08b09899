from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat_utc
from ..core.enums import PresenceStatus, TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    company_id: int
    task_code: str
    title: str
    status: TaskStatus
    assigned_to: Optional[int] = None


@dataclass(frozen=True)
class TaskPing:
    """Location sample taken while a staff member works a task."""

    ping_id: int
    task_id: int
    staff_id: int
    latitude: float
    longitude: float
    presence_status: PresenceStatus
    timestamp: datetime
    staff_name: Optional[str] = None
    battery_percent: Optional[float] = None
    movement_type: Optional[str] = None
    destination_latitude: Optional[float] = None
    destination_longitude: Optional[float] = None
    address: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    pincode: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.ping_id,
            "taskId": self.task_id,
            "staffId": self.staff_id,
            "staffName": self.staff_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "batteryPercent": self.battery_percent,
            "movementType": self.movement_type,
            "destinationLat": self.destination_latitude,
            "destinationLng": self.destination_longitude,
            "address": self.address,
            "city": self.city,
            "area": self.area,
            "pincode": self.pincode,
            "presenceStatus": self.presence_status.value,
            "timestamp": isoformat_utc(self.timestamp),
        }

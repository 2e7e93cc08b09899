from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..branches.service import BranchService
from ..common.datetime_utils import isoformat_utc, now_utc, parse_timestamp, utc_day_bounds
from ..common.geo import path_distance_m
from ..common.validators import clamp_limit, optional_float, require_coordinates
from ..core.constants import DEFAULT_OFFICE_RADIUS_M, DEFAULT_TRACKING_LIMIT, MAX_TRACKING_LIMIT
from ..core.enums import PresenceStatus, TrackingDenial
from ..core.exceptions import AuthorizationError, NotFoundError, TrackingNotAllowedError
from ..geocoding.client import ReverseGeocoder, safe_reverse
from ..realtime.events import TRACKING_LOCATION, tracking_location_payload
from ..realtime.hub import EventHub, tracking_channel
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from .model import PresenceRecord, storable_presence_status
from .repository import PresenceRepository

logger = logging.getLogger(__name__)

CLIENT_STATUSES = frozenset({PresenceStatus.IN_OFFICE.value, PresenceStatus.OUT_OF_OFFICE.value})


@dataclass(frozen=True)
class TrackingGate:
    can_track: bool
    reason: Optional[TrackingDenial] = None


def attendance_gate(record: Optional[AttendanceRecord]) -> TrackingGate:
    """Track only while punched in, not punched out, and not on leave."""

    if record is None:
        return TrackingGate(False, TrackingDenial.NO_ATTENDANCE)
    if record.punch_in is None:
        return TrackingGate(False, TrackingDenial.NO_CHECK_IN)
    if record.punch_out is not None:
        return TrackingGate(False, TrackingDenial.CHECKED_OUT)
    if record.leave_type and str(record.leave_type).strip():
        return TrackingGate(False, TrackingDenial.ON_LEAVE)
    return TrackingGate(True)


class PresenceService:
    def __init__(
        self,
        presence: PresenceRepository,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        branches: BranchService,
        *,
        geocoder: Optional[ReverseGeocoder] = None,
        events: Optional[EventHub] = None,
        office_radius_m: int = DEFAULT_OFFICE_RADIUS_M,
    ):
        self._presence = presence
        self._attendance = attendance
        self._staff = staff
        self._branches = branches
        self._geocoder = geocoder
        self._events = events
        self._office_radius_m = int(office_radius_m)

    def _get_staff(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def tracking_gate(self, staff_id: int, *, now: Optional[datetime] = None) -> TrackingGate:
        today = (now or now_utc()).date()
        return attendance_gate(self._attendance.get_for_staff_and_date(staff_id, today))

    def tracking_status(self, staff_id: int, *, now: Optional[datetime] = None) -> dict[str, Any]:
        staff = self._get_staff(staff_id)
        gate = self.tracking_gate(staff_id, now=now)

        branch_geofence = None
        geofence = self._branches.geofence_for(staff.branch_id)
        if geofence and geofence.enabled:
            branch_geofence = {
                "latitude": geofence.latitude,
                "longitude": geofence.longitude,
                "radius": geofence.effective_radius(self._office_radius_m),
            }

        return {
            "canTrack": gate.can_track,
            "reason": gate.reason.value if gate.reason else None,
            "branchGeofence": branch_geofence,
        }

    def store_presence(
        self,
        staff_id: int,
        *,
        lat: Any,
        lng: Any,
        timestamp: Any = None,
        battery_percent: Any = None,
        movement_type: Optional[str] = None,
        accuracy: Any = None,
        presence_status: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PresenceRecord:
        latitude, longitude = require_coordinates(lat, lng)
        staff = self._get_staff(staff_id)

        gate = self.tracking_gate(staff_id, now=now)
        if not gate.can_track:
            raise TrackingNotAllowedError(gate.reason.value)

        if isinstance(presence_status, str) and presence_status in CLIENT_STATUSES:
            status = PresenceStatus(presence_status)
        else:
            status = self._branches.office_status(
                staff.branch_id, latitude, longitude, default_radius_m=self._office_radius_m
            )

        geo = safe_reverse(self._geocoder, latitude, longitude)

        draft = PresenceRecord(
            presence_id=0,
            staff_id=staff.staff_id,
            company_id=staff.company_id,
            staff_name=staff.full_name,
            latitude=latitude,
            longitude=longitude,
            accuracy=optional_float(accuracy, "accuracy"),
            battery_percent=optional_float(battery_percent, "batteryPercent"),
            movement_type=movement_type or None,
            address=geo.address,
            full_address=geo.full_address or geo.address,
            city=geo.city,
            area=geo.area,
            pincode=geo.pincode,
            presence_status=storable_presence_status(status),
            timestamp=parse_timestamp(timestamp if timestamp is not None else now),
        )
        presence_id = self._presence.add(draft)
        saved = replace(draft, presence_id=presence_id)

        logger.info(
            "presence stored status=%s",
            status.value,
            extra={"staff_id": staff.staff_id},
        )
        if self._events is not None:
            self._events.publish(tracking_channel(staff.staff_id), TRACKING_LOCATION, tracking_location_payload(saved))
        return saved

    def list_presence(
        self,
        company_id: int,
        *,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Any = None,
    ):
        return self._presence.list_recent(
            company_id=company_id,
            staff_id=staff_id,
            start=start,
            end=end,
            limit=clamp_limit(limit, default=DEFAULT_TRACKING_LIMIT, maximum=MAX_TRACKING_LIMIT),
        )

    def live_positions(self, company_id: int):
        return self._presence.latest_per_staff(company_id)

    def timeline(self, staff_id: int, day: date) -> dict[str, Any]:
        staff = self._get_staff(staff_id)
        start, end = utc_day_bounds(day)
        records = list(self._presence.list_for_staff_between(staff_id, start, end))

        counts = {status.value: 0 for status in PresenceStatus}
        for r in records:
            counts[r.presence_status.value] += 1

        distance_m = path_distance_m((r.latitude, r.longitude) for r in records)
        return {
            "staffId": staff.staff_id,
            "staffName": staff.full_name,
            "date": day.isoformat(),
            "points": [r.to_dict() for r in records],
            "distanceKm": round(distance_m / 1000, 3),
            "firstSeen": isoformat_utc(records[0].timestamp) if records else None,
            "lastSeen": isoformat_utc(records[-1].timestamp) if records else None,
            "statusCounts": counts,
        }

    def start_tracking(self, company_id: int, staff_id: int) -> dict[str, Any]:
        staff = self._get_staff(staff_id)
        if staff.company_id != company_id:
            raise AuthorizationError("Staff belongs to another company")
        return {
            "message": f"Tracking started for {staff.full_name}",
            "staffId": staff.staff_id,
            "staffName": staff.full_name,
        }

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from ..branches.service import BranchService
from ..common.datetime_utils import parse_timestamp
from ..common.validators import clamp_limit, optional_float, require_coordinates
from ..core.constants import DEFAULT_TASK_RADIUS_M, DEFAULT_TRACKING_LIMIT, MAX_TRACKING_LIMIT
from ..core.enums import PresenceStatus, TaskStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..geocoding.client import ReverseGeocoder, safe_reverse
from ..staff.repository import StaffRepository
from .model import Task, TaskPing
from .repository import TaskPingRepository, TaskRepository

logger = logging.getLogger(__name__)


class TaskTrackingService:
    """Location pings recorded while a task is being worked."""

    def __init__(
        self,
        tasks: TaskRepository,
        pings: TaskPingRepository,
        staff: StaffRepository,
        branches: BranchService,
        *,
        geocoder: Optional[ReverseGeocoder] = None,
        task_radius_m: int = DEFAULT_TASK_RADIUS_M,
    ):
        self._tasks = tasks
        self._pings = pings
        self._staff = staff
        self._branches = branches
        self._geocoder = geocoder
        self._task_radius_m = int(task_radius_m)

    def resolve_task(self, company_id: int, task_ref: Any) -> Task:
        """Accept either the numeric id or the human task code (TASK-...)."""

        if task_ref is None or (isinstance(task_ref, str) and not task_ref.strip()):
            raise ValidationError("taskId, lat, lng required")

        ref = str(task_ref).strip()
        task = self._tasks.get_by_id(int(ref)) if ref.isdigit() else self._tasks.get_by_code(ref)
        if not task or task.company_id != company_id:
            raise NotFoundError("Task not found")
        return task

    def store_task_ping(
        self,
        staff_id: int,
        company_id: int,
        *,
        task_id: Any,
        lat: Any,
        lng: Any,
        timestamp: Any = None,
        battery_percent: Any = None,
        movement_type: Optional[str] = None,
        destination_lat: Any = None,
        destination_lng: Any = None,
    ) -> TaskPing:
        if task_id is None or lat is None or lng is None:
            raise ValidationError("taskId, lat, lng required")
        latitude, longitude = require_coordinates(lat, lng)
        task = self.resolve_task(company_id, task_id)

        # The ping is attributed to the assignee when the task has one.
        owner = self._staff.get_by_id(task.assigned_to) if task.assigned_to else None
        caller = self._staff.get_by_id(staff_id)
        staff = owner or caller
        if staff is None:
            raise NotFoundError("Staff not found")

        if task.status == TaskStatus.IN_PROGRESS:
            status = PresenceStatus.TASK
        else:
            branch_id = staff.branch_id or (caller.branch_id if caller else None)
            status = self._branches.office_status(branch_id, latitude, longitude, default_radius_m=self._task_radius_m)

        geo = safe_reverse(self._geocoder, latitude, longitude)
        draft = TaskPing(
            ping_id=0,
            task_id=task.task_id,
            staff_id=staff.staff_id,
            staff_name=staff.full_name,
            latitude=latitude,
            longitude=longitude,
            battery_percent=optional_float(battery_percent, "batteryPercent"),
            movement_type=movement_type or None,
            destination_latitude=optional_float(destination_lat, "destinationLat"),
            destination_longitude=optional_float(destination_lng, "destinationLng"),
            address=geo.address,
            city=geo.city,
            area=geo.area,
            pincode=geo.pincode,
            presence_status=status,
            timestamp=parse_timestamp(timestamp),
        )
        ping_id = self._pings.add(draft)
        logger.info("task ping stored task=%s status=%s", task.task_code, status.value, extra={"staff_id": staff.staff_id})
        return replace(draft, ping_id=ping_id)

    def list_task_pings(
        self,
        company_id: int,
        *,
        task_id: Any = None,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Any = None,
    ):
        resolved_task_id = self.resolve_task(company_id, task_id).task_id if task_id not in (None, "") else None
        return self._pings.list_recent(
            company_id=company_id,
            task_id=resolved_task_id,
            staff_id=staff_id,
            start=start,
            end=end,
            limit=clamp_limit(limit, default=DEFAULT_TRACKING_LIMIT, maximum=MAX_TRACKING_LIMIT),
        )

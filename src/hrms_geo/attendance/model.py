from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance day for one staff member (UTC calendar day)."""

    attendance_id: int
    staff_id: int
    work_date: date
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    status: AttendanceStatus
    leave_type: Optional[str] = None
    late_minutes: int = 0
    early_minutes: int = 0
    fine_amount: float = 0.0
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (joined with staff and shift)."""

    staff_id: int
    full_name: str
    username: str
    shift_name: Optional[str]
    break_minutes: int
    work_date: date
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    status: AttendanceStatus
    late_minutes: int = 0
    early_minutes: int = 0
    fine_amount: float = 0.0
    leave_type: Optional[str] = None

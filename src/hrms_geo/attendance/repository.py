from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_punch_in(
        self,
        *,
        staff_id: int,
        work_date: date,
        punch_in: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        fine_amount: float = 0.0,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out: datetime,
        status: AttendanceStatus,
        early_minutes: int = 0,
        fine_amount: float = 0.0,
        note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def upsert_leave(self, *, staff_id: int, work_date: date, leave_type: str) -> int:
        """Create or convert the day's record into a leave day."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        company_id: int,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.model import AttendanceReportRow


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: (out - in) - break_minutes, not below 0. Leave days count 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        if row.punch_in is None or row.punch_out is None:
            return 0
        minutes = int((row.punch_out - row.punch_in).total_seconds() // 60)
        minutes -= int(row.break_minutes or 0)
        return max(minutes, 0)

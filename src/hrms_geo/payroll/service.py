from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import isoformat_utc
from ..core.exceptions import ValidationError
from .calculator.base import PayrollCalculator, hhmm
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()

    def build_attendance_report(
        self,
        *,
        company_id: int,
        start: date,
        end: date,
        staff_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        query_rows = self._attendance.get_report_rows(
            company_id=company_id, start_date=start, end_date=end, staff_id=staff_id
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)

            out_rows.append(
                {
                    "staff_id": r.staff_id,
                    "full_name": r.full_name,
                    "username": r.username,
                    "shift_name": r.shift_name or "-",
                    "work_date": r.work_date.isoformat(),
                    "punch_in": isoformat_utc(r.punch_in),
                    "punch_out": isoformat_utc(r.punch_out),
                    "worked_hours": hhmm(minutes),
                    "status": r.status.value,
                    "leave_type": r.leave_type,
                    "late_minutes": r.late_minutes,
                    "early_minutes": r.early_minutes,
                    "fine_amount": r.fine_amount,
                }
            )

            s = summary_map.get(r.staff_id)
            if not s:
                s = {
                    "staff_id": r.staff_id,
                    "full_name": r.full_name,
                    "username": r.username,
                    "total_minutes": 0,
                    "late_minutes": 0,
                    "early_minutes": 0,
                    "fine_amount": 0.0,
                    "leave_days": 0,
                }
                summary_map[r.staff_id] = s
            s["total_minutes"] += minutes
            s["late_minutes"] += r.late_minutes
            s["early_minutes"] += r.early_minutes
            s["fine_amount"] += r.fine_amount
            if r.leave_type:
                s["leave_days"] += 1

        summary = []
        for s in summary_map.values():
            total_minutes = int(s["total_minutes"])
            summary.append(
                {
                    "staff_id": s["staff_id"],
                    "full_name": s["full_name"],
                    "username": s["username"],
                    "total_minutes": total_minutes,
                    "total_hours": hhmm(total_minutes),
                    "late_minutes": s["late_minutes"],
                    "early_minutes": s["early_minutes"],
                    "fine_amount": round(s["fine_amount"], 2),
                    "leave_days": s["leave_days"],
                }
            )

        summary.sort(key=lambda x: x["total_minutes"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)

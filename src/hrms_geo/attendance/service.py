from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_utc, parse_timestamp
from ..common.validators import require_non_empty
from ..companies.repository import CompanyRepository
from ..core.enums import FineApplyTo
from ..core.exceptions import NotFoundError, ValidationError
from ..payroll.fines import DISABLED, FineConfig, calculate_fine_amount, effective_fine_config
from ..shifts.repository import ShiftRepository
from ..staff.model import Staff
from ..staff.repository import StaffRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        staff: StaffRepository,
        shifts: ShiftRepository,
        companies: CompanyRepository | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: int = 5,
    ):
        self._attendance = attendance
        self._staff = staff
        self._shifts = shifts
        self._companies = companies
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = int(grace_minutes)

    def _get_staff(self, staff_id: int) -> Staff:
        staff = self._staff.get_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff not found")
        return staff

    def _fine_config(self, company_id: int) -> FineConfig:
        if not self._companies:
            return DISABLED
        company = self._companies.get_by_id(company_id)
        return effective_fine_config(company.settings if company else None)

    def punch_in(self, staff_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = parse_timestamp(now) if now else now_utc()
        today = now.date()

        staff = self._get_staff(staff_id)

        existing = self._attendance.get_for_staff_and_date(staff_id, today)
        if existing and existing.leave_type:
            raise ValidationError("You are on leave today")
        if existing:
            raise ValidationError("You have already punched in today")

        shift = self._shifts.get_by_id(staff.shift_id) if staff.shift_id else None
        config = self._fine_config(staff.company_id)
        grace = config.grace_time_minutes if config.grace_time_minutes else self._grace_minutes

        strategy = self._factory.for_punch_in(now=now, today=today, shift=shift, grace_minutes=grace)
        decision = strategy.decide_punch_in(now=now, today=today, shift=shift, grace_minutes=grace)

        fine = 0.0
        if shift and decision.minutes:
            fine = calculate_fine_amount(
                decision.minutes, FineApplyTo.LATE_ARRIVAL, config, staff.daily_salary, shift.hours
            )

        self._attendance.create_punch_in(
            staff_id=staff_id,
            work_date=today,
            punch_in=now,
            status=decision.status,
            late_minutes=decision.minutes,
            fine_amount=fine,
            note=decision.note,
        )
        logger.info(
            "punch in %s late_minutes=%s fine=%s",
            decision.status.value,
            decision.minutes,
            fine,
            extra={"staff_id": staff_id},
        )
        return self._attendance.get_for_staff_and_date(staff_id, today)

    def punch_out(self, staff_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = parse_timestamp(now) if now else now_utc()
        today = now.date()

        record = self._attendance.get_for_staff_and_date(staff_id, today)
        if not record or record.punch_in is None:
            raise ValidationError("You have not punched in today")
        if record.punch_out is not None:
            raise ValidationError("You have already punched out today")

        staff = self._get_staff(staff_id)
        shift = self._shifts.get_by_id(staff.shift_id) if staff.shift_id else None

        strategy = self._factory.for_punch_out(now=now, today=today, shift=shift)
        decision = strategy.decide_punch_out(now=now, today=today, shift=shift, current=record.status)

        early_fine = 0.0
        if shift and decision.minutes:
            early_fine = calculate_fine_amount(
                decision.minutes,
                FineApplyTo.EARLY_EXIT,
                self._fine_config(staff.company_id),
                staff.daily_salary,
                shift.hours,
            )
        total_fine = round(record.fine_amount + early_fine, 2)

        self._attendance.update_punch_out(
            attendance_id=record.attendance_id,
            punch_out=now,
            status=decision.status,
            early_minutes=decision.minutes,
            fine_amount=total_fine,
            note=decision.note or record.note,
        )
        logger.info(
            "punch out %s early_minutes=%s fine=%s",
            decision.status.value,
            decision.minutes,
            total_fine,
            extra={"staff_id": staff_id},
        )
        return self._attendance.get_for_staff_and_date(staff_id, today)

    def mark_leave(self, staff_id: int, day: date, leave_type: str) -> AttendanceRecord:
        leave_type = require_non_empty(leave_type, "Leave type")
        self._get_staff(staff_id)

        existing = self._attendance.get_for_staff_and_date(staff_id, day)
        if existing and existing.punch_in is not None:
            raise ValidationError("Cannot mark leave on a day with a punch-in")

        self._attendance.upsert_leave(staff_id=staff_id, work_date=day, leave_type=leave_type)
        return self._attendance.get_for_staff_and_date(staff_id, day)

    def get_today_record(self, staff_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        today = (now or now_utc()).date()
        return self._attendance.get_for_staff_and_date(staff_id, today)

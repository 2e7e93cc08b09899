from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision
from .shift_clock import minutes_between, shift_end


class EarlyLeaveStrategy(AttendanceStrategy):
    """Punch-out before shift end."""

    def decide_punch_in(self, *, now: datetime, today: date, shift: Optional[Shift], grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.UNKNOWN)

    def decide_punch_out(self, *, now: datetime, today: date, shift: Optional[Shift], current: AttendanceStatus) -> StatusDecision:
        minutes = minutes_between(now, shift_end(today, shift)) if shift else 0
        # A late arrival that also leaves early stays LATE; the early minutes are still fined.
        status = current if current == AttendanceStatus.LATE else AttendanceStatus.EARLY_LEAVE
        return StatusDecision(status=status, minutes=minutes, note=f"Left {minutes} min early")

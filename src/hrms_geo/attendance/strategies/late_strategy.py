from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision
from .shift_clock import minutes_between, shift_start


class LateStrategy(AttendanceStrategy):
    """Punch-in after shift start + grace. Late minutes count from shift start."""

    def decide_punch_in(self, *, now: datetime, today: date, shift: Optional[Shift], grace_minutes: int) -> StatusDecision:
        minutes = minutes_between(shift_start(today, shift), now) if shift else 0
        return StatusDecision(status=AttendanceStatus.LATE, minutes=minutes, note=f"Late by {minutes} min")

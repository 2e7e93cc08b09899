from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..shifts.model import Shift
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.shift_clock import shift_end, shift_start


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_punch_in(self, *, now: datetime, today: date, shift: Optional[Shift], grace_minutes: int) -> AttendanceStrategy:
        if not shift:
            return NormalStrategy()

        if now <= shift_start(today, shift) + timedelta(minutes=grace_minutes):
            return NormalStrategy()
        return LateStrategy()

    def for_punch_out(self, *, now: datetime, today: date, shift: Optional[Shift]) -> AttendanceStrategy:
        if not shift:
            return NormalStrategy()

        if now < shift_end(today, shift):
            return EarlyLeaveStrategy()
        return NormalStrategy()

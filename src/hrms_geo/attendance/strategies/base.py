from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...shifts.model import Shift


@dataclass(frozen=True)
class StatusDecision:
    """Outcome of a punch: the day's status plus late/early minutes to fine."""

    status: AttendanceStatus
    minutes: int = 0
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_punch_in(self, *, now: datetime, today: date, shift: Optional[Shift], grace_minutes: int) -> StatusDecision:
        raise NotImplementedError

    def decide_punch_out(self, *, now: datetime, today: date, shift: Optional[Shift], current: AttendanceStatus) -> StatusDecision:
        # Punching out on or after shift end keeps whatever punch-in decided.
        return StatusDecision(status=current)

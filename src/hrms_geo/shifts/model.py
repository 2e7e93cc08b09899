from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time


@dataclass(frozen=True)
class Shift:
    """A working shift. Start/end are wall-clock times in UTC."""

    shift_id: int
    shift_name: str
    start_time: time
    end_time: time
    break_minutes: int = 0

    @property
    def hours(self) -> float:
        start = datetime.combine(datetime.min.date(), self.start_time)
        end = datetime.combine(datetime.min.date(), self.end_time)
        seconds = (end - start).total_seconds()
        if seconds <= 0:
            # Overnight shift.
            seconds += 24 * 3600
        return seconds / 3600

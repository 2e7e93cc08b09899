from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ...shifts.model import Shift


def shift_start(today: date, shift: Shift) -> datetime:
    return datetime.combine(today, shift.start_time, tzinfo=timezone.utc)


def shift_end(today: date, shift: Shift) -> datetime:
    end = datetime.combine(today, shift.end_time, tzinfo=timezone.utc)
    if shift.end_time <= shift.start_time:
        end += timedelta(days=1)
    return end


def minutes_between(earlier: datetime, later: datetime) -> int:
    return max(0, round((later - earlier).total_seconds() / 60))

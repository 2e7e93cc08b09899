from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceReportRow


def hhmm(minutes: int) -> str:
    """Render a minute count as ``HH:MM`` (hours may exceed 24)."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class PayrollCalculator(ABC):
    """Decides how much of an attendance day counts as paid work."""

    @abstractmethod
    def worked_minutes(self, row: AttendanceReportRow) -> int:
        raise NotImplementedError

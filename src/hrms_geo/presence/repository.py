from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PresenceRecord


class PresenceRepository(Protocol):
    def add(self, record: PresenceRecord) -> int:
        """Insert ``record`` (its ``presence_id`` is ignored) and return the new id."""

        raise NotImplementedError

    def list_recent(
        self,
        *,
        company_id: int,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[PresenceRecord]:
        """Newest first."""

        raise NotImplementedError

    def latest_per_staff(self, company_id: int) -> Sequence[PresenceRecord]:
        raise NotImplementedError

    def list_for_staff_between(self, staff_id: int, start: datetime, end: datetime) -> Sequence[PresenceRecord]:
        """Oldest first, ``start <= timestamp < end``."""

        raise NotImplementedError

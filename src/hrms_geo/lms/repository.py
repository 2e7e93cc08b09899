from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import LiveSession


class LiveSessionRepository(Protocol):
    def create(
        self,
        *,
        company_id: int,
        title: str,
        starts_at: datetime,
        description: Optional[str],
        meeting_link: Optional[str],
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[LiveSession]:
        raise NotImplementedError

    def list_upcoming(self, company_id: int, *, since: datetime, limit: int) -> Sequence[LiveSession]:
        """Sessions starting at or after ``since``, soonest first."""

        raise NotImplementedError

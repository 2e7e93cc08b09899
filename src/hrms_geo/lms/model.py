from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import isoformat_utc


@dataclass(frozen=True)
class LiveSession:
    session_id: int
    company_id: int
    title: str
    starts_at: datetime
    description: Optional[str] = None
    meeting_link: Optional[str] = None
    created_by: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.session_id,
            "title": self.title,
            "description": self.description,
            "dateTime": isoformat_utc(self.starts_at),
            "meetingLink": self.meeting_link,
            "createdBy": self.created_by,
        }

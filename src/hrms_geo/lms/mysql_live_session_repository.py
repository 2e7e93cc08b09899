from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LiveSession
from .repository import LiveSessionRepository

_COLUMNS = "session_id, company_id, title, description, starts_at, meeting_link, created_by"


def _to_session(r: dict) -> LiveSession:
    return LiveSession(
        session_id=int(r["session_id"]),
        company_id=int(r["company_id"]),
        title=r["title"],
        description=r.get("description"),
        starts_at=from_db_utc(r["starts_at"]),
        meeting_link=r.get("meeting_link"),
        created_by=r.get("created_by"),
    )


class MySQLLiveSessionRepository(LiveSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO live_sessions(company_id, title, description, starts_at, meeting_link, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (company_id, title, description, to_db_utc(starts_at), meeting_link, created_by),
            )
            return int(cur.lastrowid)

    def get_by_id(self, session_id: int) -> Optional[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM live_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_upcoming(self, company_id: int, *, since: datetime, limit: int) -> Sequence[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM live_sessions
                WHERE company_id=%s AND starts_at >= %s
                ORDER BY starts_at ASC
                LIMIT %s
                """,
                (company_id, to_db_utc(since), int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]

from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository


def _to_shift(row: dict) -> Shift:
    return Shift(
        shift_id=int(row["shift_id"]),
        shift_name=row["shift_name"],
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        break_minutes=int(row.get("break_minutes") or 0),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, shift_name, start_time, end_time, break_minutes
                FROM shifts
                WHERE shift_id=%s
                """,
                (shift_id,),
            )
            row = fetchone(cur)
            return _to_shift(row) if row else None

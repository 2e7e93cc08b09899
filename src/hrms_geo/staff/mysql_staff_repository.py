from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import Staff
from .repository import StaffRepository

_COLUMNS = """
    staff_id, company_id, branch_id, shift_id, role_id, full_name, username,
    password_hash, role_name, daily_salary, is_active
"""


def _to_staff(row: dict) -> Staff:
    return Staff(
        staff_id=int(row["staff_id"]),
        company_id=int(row["company_id"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role_name=row["role_name"],
        branch_id=row.get("branch_id"),
        shift_id=row.get("shift_id"),
        role_id=row.get("role_id"),
        daily_salary=optional_float(row.get("daily_salary")),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE staff_id=%s", (staff_id,))
            row = fetchone(cur)
            return _to_staff(row) if row else None

    def get_by_username(self, username: str) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM staff WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_staff(row) if row else None

    def list_by_company(self, company_id: int) -> Sequence[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM staff WHERE company_id=%s AND is_active=1 ORDER BY full_name",
                (company_id,),
            )
            return [_to_staff(r) for r in fetchall(cur)]

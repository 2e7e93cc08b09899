from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, staff_id, work_date, punch_in, punch_out, status,
    leave_type, late_minutes, early_minutes, fine_amount, note
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        punch_in=from_db_utc(r.get("punch_in")),
        punch_out=from_db_utc(r.get("punch_out")),
        status=AttendanceStatus(r["status"]),
        leave_type=r.get("leave_type"),
        late_minutes=int(r.get("late_minutes") or 0),
        early_minutes=int(r.get("early_minutes") or 0),
        fine_amount=float(r.get("fine_amount") or 0),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_staff_and_date(self, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE staff_id=%s AND work_date=%s",
                (staff_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_punch_in(
        self,
        *,
        staff_id: int,
        work_date: date,
        punch_in: datetime,
        status: AttendanceStatus,
        late_minutes: int = 0,
        fine_amount: float = 0.0,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(staff_id, work_date, punch_in, status, late_minutes, fine_amount, note)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (staff_id, work_date, to_db_utc(punch_in), status.value, int(late_minutes), fine_amount, note),
            )
            return int(cur.lastrowid)

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out: datetime,
        status: AttendanceStatus,
        early_minutes: int = 0,
        fine_amount: float = 0.0,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_out=%s, status=%s, early_minutes=%s, fine_amount=%s, note=%s
                WHERE attendance_id=%s
                """,
                (to_db_utc(punch_out), status.value, int(early_minutes), fine_amount, note, attendance_id),
            )
            return cur.rowcount > 0

    def upsert_leave(self, *, staff_id: int, work_date: date, leave_type: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(staff_id, work_date, status, leave_type)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), leave_type=VALUES(leave_type)
                """,
                (staff_id, work_date, AttendanceStatus.ON_LEAVE.value, leave_type),
            )
            cur.execute(
                "SELECT attendance_id FROM attendance_records WHERE staff_id=%s AND work_date=%s",
                (staff_id, work_date),
            )
            row = fetchone(cur)
            return int(row["attendance_id"])

    def get_report_rows(
        self,
        *,
        company_id: int,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["st.company_id=%s", "ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [int(company_id), start_date, end_date]

        if staff_id is not None:
            clauses.append("st.staff_id=%s")
            params.append(int(staff_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    st.staff_id, st.full_name, st.username,
                    s.shift_name, COALESCE(s.break_minutes, 0) AS break_minutes,
                    ar.work_date, ar.punch_in, ar.punch_out, ar.status, ar.leave_type,
                    ar.late_minutes, ar.early_minutes, ar.fine_amount
                FROM attendance_records ar
                JOIN staff st ON st.staff_id = ar.staff_id
                LEFT JOIN shifts s ON s.shift_id = st.shift_id
                WHERE {where}
                ORDER BY ar.work_date DESC, st.staff_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    staff_id=int(r["staff_id"]),
                    full_name=r["full_name"],
                    username=r["username"],
                    shift_name=r.get("shift_name"),
                    break_minutes=int(r.get("break_minutes") or 0),
                    work_date=r["work_date"],
                    punch_in=from_db_utc(r.get("punch_in")),
                    punch_out=from_db_utc(r.get("punch_out")),
                    status=AttendanceStatus(r["status"]),
                    late_minutes=int(r.get("late_minutes") or 0),
                    early_minutes=int(r.get("early_minutes") or 0),
                    fine_amount=float(r.get("fine_amount") or 0),
                    leave_type=r.get("leave_type"),
                )
                for r in rows
            ]

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import PresenceStatus, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_float
from .model import Task, TaskPing
from .repository import TaskPingRepository, TaskRepository

_TASK_COLUMNS = "task_id, company_id, task_code, title, status, assigned_to"

_PING_COLUMNS = """
    tt.ping_id, tt.task_id, tt.staff_id, tt.staff_name, tt.latitude, tt.longitude,
    tt.battery_percent, tt.movement_type, tt.destination_latitude, tt.destination_longitude,
    tt.address, tt.city, tt.area, tt.pincode, tt.presence_status, tt.timestamp
"""


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        company_id=int(r["company_id"]),
        task_code=r["task_code"],
        title=r["title"],
        status=TaskStatus(r["status"]),
        assigned_to=r.get("assigned_to"),
    )


def _to_ping(r: dict) -> TaskPing:
    return TaskPing(
        ping_id=int(r["ping_id"]),
        task_id=int(r["task_id"]),
        staff_id=int(r["staff_id"]),
        staff_name=r.get("staff_name"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        battery_percent=optional_float(r.get("battery_percent")),
        movement_type=r.get("movement_type"),
        destination_latitude=optional_float(r.get("destination_latitude")),
        destination_longitude=optional_float(r.get("destination_longitude")),
        address=r.get("address"),
        city=r.get("city"),
        area=r.get("area"),
        pincode=r.get("pincode"),
        presence_status=PresenceStatus(r["presence_status"]),
        timestamp=from_db_utc(r["timestamp"]),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TASK_COLUMNS} FROM tasks WHERE task_id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def get_by_code(self, task_code: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TASK_COLUMNS} FROM tasks WHERE task_code=%s", (task_code,))
            r = fetchone(cur)
            return _to_task(r) if r else None


class MySQLTaskPingRepository(TaskPingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, ping: TaskPing) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO task_tracking(
                    task_id, staff_id, staff_name, latitude, longitude, battery_percent, movement_type,
                    destination_latitude, destination_longitude, address, city, area, pincode,
                    presence_status, timestamp
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    ping.task_id,
                    ping.staff_id,
                    ping.staff_name,
                    ping.latitude,
                    ping.longitude,
                    ping.battery_percent,
                    ping.movement_type,
                    ping.destination_latitude,
                    ping.destination_longitude,
                    ping.address,
                    ping.city,
                    ping.area,
                    ping.pincode,
                    ping.presence_status.value,
                    to_db_utc(ping.timestamp),
                ),
            )
            return int(cur.lastrowid)

    def list_recent(
        self,
        *,
        company_id: int,
        task_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[TaskPing]:
        clauses = ["t.company_id=%s"]
        params: list[object] = [int(company_id)]
        if task_id is not None:
            clauses.append("tt.task_id=%s")
            params.append(int(task_id))
        if staff_id is not None:
            clauses.append("tt.staff_id=%s")
            params.append(int(staff_id))
        if start is not None:
            clauses.append("tt.timestamp >= %s")
            params.append(to_db_utc(start))
        if end is not None:
            clauses.append("tt.timestamp <= %s")
            params.append(to_db_utc(end))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PING_COLUMNS}
                FROM task_tracking tt
                JOIN tasks t ON t.task_id = tt.task_id
                WHERE {" AND ".join(clauses)}
                ORDER BY tt.timestamp DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_ping(r) for r in fetchall(cur)]

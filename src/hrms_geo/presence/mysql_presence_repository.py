from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc, to_db_utc
from ..core.enums import PresenceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, optional_float
from .model import PresenceRecord, storable_presence_status
from .repository import PresenceRepository

_COLUMNS = """
    presence_id, staff_id, company_id, staff_name, latitude, longitude, accuracy,
    battery_percent, movement_type, address, full_address, city, area, pincode,
    presence_status, timestamp
"""


def _to_record(r: dict) -> PresenceRecord:
    return PresenceRecord(
        presence_id=int(r["presence_id"]),
        staff_id=int(r["staff_id"]),
        company_id=int(r["company_id"]),
        staff_name=r.get("staff_name"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        accuracy=optional_float(r.get("accuracy")),
        battery_percent=optional_float(r.get("battery_percent")),
        movement_type=r.get("movement_type"),
        address=r.get("address"),
        full_address=r.get("full_address"),
        city=r.get("city"),
        area=r.get("area"),
        pincode=r.get("pincode"),
        presence_status=PresenceStatus(r["presence_status"]),
        timestamp=from_db_utc(r["timestamp"]),
    )


class MySQLPresenceRepository(PresenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, record: PresenceRecord) -> int:
        status = storable_presence_status(record.presence_status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO presence_tracking(
                    staff_id, company_id, staff_name, latitude, longitude, accuracy,
                    battery_percent, movement_type, address, full_address, city, area, pincode,
                    presence_status, timestamp
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.staff_id,
                    record.company_id,
                    record.staff_name,
                    record.latitude,
                    record.longitude,
                    record.accuracy,
                    record.battery_percent,
                    record.movement_type,
                    record.address,
                    record.full_address,
                    record.city,
                    record.area,
                    record.pincode,
                    status.value,
                    to_db_utc(record.timestamp),
                ),
            )
            return int(cur.lastrowid)

    def list_recent(
        self,
        *,
        company_id: int,
        staff_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 500,
    ) -> Sequence[PresenceRecord]:
        clauses = ["company_id=%s"]
        params: list[object] = [int(company_id)]
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))
        if start is not None:
            clauses.append("timestamp >= %s")
            params.append(to_db_utc(start))
        if end is not None:
            clauses.append("timestamp <= %s")
            params.append(to_db_utc(end))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM presence_tracking
                WHERE {" AND ".join(clauses)}
                ORDER BY timestamp DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def latest_per_staff(self, company_id: int) -> Sequence[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM (
                    SELECT pt.*, ROW_NUMBER() OVER (PARTITION BY staff_id ORDER BY timestamp DESC, presence_id DESC) AS rn
                    FROM presence_tracking pt
                    WHERE company_id=%s
                ) latest
                WHERE rn = 1
                ORDER BY timestamp DESC
                """,
                (int(company_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_staff_between(self, staff_id: int, start: datetime, end: datetime) -> Sequence[PresenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM presence_tracking
                WHERE staff_id=%s AND timestamp >= %s AND timestamp < %s
                ORDER BY timestamp ASC
                """,
                (int(staff_id), to_db_utc(start), to_db_utc(end)),
            )
            return [_to_record(r) for r in fetchall(cur)]

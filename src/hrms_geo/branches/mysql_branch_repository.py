from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, optional_float
from .model import Branch, Geofence
from .repository import BranchRepository

_COLUMNS = """
    branch_id, company_id, branch_name,
    geofence_enabled, geofence_latitude, geofence_longitude, geofence_radius_m
"""


def _to_branch(row: dict) -> Branch:
    radius = row.get("geofence_radius_m")
    return Branch(
        branch_id=int(row["branch_id"]),
        company_id=int(row["company_id"]),
        branch_name=row["branch_name"],
        geofence=Geofence(
            enabled=bool(row.get("geofence_enabled")),
            latitude=optional_float(row.get("geofence_latitude")),
            longitude=optional_float(row.get("geofence_longitude")),
            radius_m=int(radius) if radius is not None else None,
        ),
    )


class MySQLBranchRepository(BranchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM branches WHERE branch_id=%s", (branch_id,))
            row = fetchone(cur)
            return _to_branch(row) if row else None

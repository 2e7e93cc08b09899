from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_db_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Role
from .repository import RoleRepository

_COLUMNS = """
    role_id, company_id, name, description, permissions, is_system_role, is_active,
    parent_role_id, hierarchy_level, display_order, created_by, created_at, updated_at
"""


def _to_role(r: dict) -> Role:
    return Role(
        role_id=int(r["role_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        description=r.get("description"),
        permissions=tuple(load_json(r.get("permissions"), [])),
        is_system_role=bool(r.get("is_system_role")),
        is_active=bool(r.get("is_active", True)),
        parent_role_id=r.get("parent_role_id"),
        hierarchy_level=int(r.get("hierarchy_level") or 0),
        display_order=int(r.get("display_order") or 0),
        created_by=r.get("created_by"),
        created_at=from_db_utc(r.get("created_at")),
        updated_at=from_db_utc(r.get("updated_at")),
    )


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_company(self, company_id: int) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM roles
                WHERE company_id=%s
                ORDER BY hierarchy_level, display_order, name
                """,
                (company_id,),
            )
            return [_to_role(r) for r in fetchall(cur)]

    def get_by_id(self, role_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM roles WHERE role_id=%s", (role_id,))
            r = fetchone(cur)
            return _to_role(r) if r else None

    def get_by_name(self, company_id: int, name: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM roles WHERE company_id=%s AND LOWER(name)=LOWER(%s)",
                (company_id, name),
            )
            r = fetchone(cur)
            return _to_role(r) if r else None

    def create(
        self,
        *,
        company_id: int,
        name: str,
        description: Optional[str],
        permissions: Sequence[str],
        created_by: Optional[int],
        is_system_role: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO roles(company_id, name, description, permissions, is_system_role, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (company_id, name, description, dump_json(list(permissions)), int(is_system_role), created_by),
            )
            return int(cur.lastrowid)

    def update(
        self,
        role_id: int,
        *,
        name: str,
        description: Optional[str],
        permissions: Sequence[str],
        is_active: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE roles
                SET name=%s, description=%s, permissions=%s, is_active=%s
                WHERE role_id=%s
                """,
                (name, description, dump_json(list(permissions)), int(is_active), role_id),
            )
            return cur.rowcount > 0

    def update_hierarchy(
        self,
        role_id: int,
        *,
        parent_role_id: Optional[int],
        hierarchy_level: int,
        display_order: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE roles
                SET parent_role_id=%s, hierarchy_level=%s, display_order=%s
                WHERE role_id=%s
                """,
                (parent_role_id, int(hierarchy_level), int(display_order), role_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, role_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM roles WHERE role_id=%s", (role_id,))
            return cur.rowcount > 0

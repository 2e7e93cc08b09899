from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, load_json
from .model import Company
from .repository import CompanyRepository


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT company_id, company_name, settings FROM companies WHERE company_id=%s",
                (company_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Company(
                company_id=int(row["company_id"]),
                company_name=row["company_name"],
                settings=load_json(row.get("settings"), {}),
            )

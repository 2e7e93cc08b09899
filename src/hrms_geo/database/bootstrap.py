from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import SystemRole
from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the SQL file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\" and quote:
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        connection_timeout=config.connect_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    config = DBConfig.from_mapping(db_config)
    ensure_database_exists(db_config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(config)
    try:
        cur = conn.cursor()
        count = 0
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        logger.info("schema applied", extra={"path": str(schema_path)})
        logger.debug("executed %d schema statements", count)
    finally:
        conn.close()


def ensure_demo_accounts(db_config: dict) -> None:
    """Create one demo company with an Admin and an Employee login.

    Safe to run repeatedly: existing rows are reused and passwords reset.
    """

    config = DBConfig.from_mapping(db_config)
    conn = _connect(config)
    try:
        cur = conn.cursor(dictionary=True)

        cur.execute("SELECT company_id FROM companies WHERE company_name=%s", ("Demo Company",))
        row = cur.fetchone()
        if row:
            company_id = int(row["company_id"])
        else:
            cur.execute(
                "INSERT INTO companies (company_name, settings) VALUES (%s, %s)",
                ("Demo Company", '{"payroll": {"fineCalculation": {"enabled": false}}}'),
            )
            company_id = int(cur.lastrowid)

        cur.execute("SELECT branch_id FROM branches WHERE company_id=%s AND branch_name=%s", (company_id, "Head Office"))
        row = cur.fetchone()
        if row:
            branch_id = int(row["branch_id"])
        else:
            cur.execute(
                """
                INSERT INTO branches (company_id, branch_name, geofence_enabled, geofence_latitude, geofence_longitude, geofence_radius_m)
                VALUES (%s, %s, 1, %s, %s, %s)
                """,
                (company_id, "Head Office", 12.9716, 77.5946, 200),
            )
            branch_id = int(cur.lastrowid)

        cur.execute("SELECT shift_id FROM shifts WHERE company_id=%s AND shift_name=%s", (company_id, "General"))
        row = cur.fetchone()
        if row:
            shift_id = int(row["shift_id"])
        else:
            cur.execute(
                "INSERT INTO shifts (company_id, shift_name, start_time, end_time, break_minutes) VALUES (%s, %s, %s, %s, %s)",
                (company_id, "General", "09:00:00", "18:00:00", 60),
            )
            shift_id = int(cur.lastrowid)

        def upsert_staff(full_name: str, username: str, password: str, role: SystemRole) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT staff_id FROM staff WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE staff
                    SET full_name=%s, password_hash=%s, role_name=%s, company_id=%s, branch_id=%s, shift_id=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role.value, company_id, branch_id, shift_id, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO staff (company_id, branch_id, shift_id, full_name, username, password_hash, role_name, daily_salary)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (company_id, branch_id, shift_id, full_name, username, password_hash, role.value, 1000),
                )

        upsert_staff("Demo Admin", "admin", "admin123", SystemRole.ADMIN)
        upsert_staff("Demo Employee", "employee", "employee123", SystemRole.EMPLOYEE)

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    config = DBConfig.from_mapping(db_config)
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

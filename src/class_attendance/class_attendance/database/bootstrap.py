from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor, fetchone, open_connection

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    ("admin@gmail.com", "Admin User", "admin"),
    ("student@gmail.com", "Student User", "student"),
    ("teacher@gmail.com", "Teacher User", "teacher"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = open_connection(conn_factory, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    ensure_database_exists(conn_factory)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_line_comments(_strip_create_db_and_use(sql))

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Schema applied to %s", conn_factory.config.database)


def ensure_default_users(db_config: dict) -> int:
    """Insert the demo admin/student/teacher accounts into an empty users table.

    Returns the number of users inserted.
    """
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory) as (_, cur):
        cur.execute("SELECT COUNT(*) AS n FROM users")
        row = fetchone(cur)
        if row and int(row["n"]) > 0:
            return 0
        cur.executemany("INSERT INTO users (email, name, role) VALUES (%s, %s, %s)", list(DEFAULT_USERS))
    logger.info("Default users created")
    return len(DEFAULT_USERS)


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

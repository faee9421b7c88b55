from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.constants import ER_DUP_ENTRY, ER_NO_REFERENCED_ROW
from ..core.exceptions import DuplicateKeyError, MissingReferenceError, StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def translate_mysql_error(exc: Exception) -> Exception:
    """Map a mysql-connector error onto the exceptions services understand.

    Returns the original exception when there is no mapping.
    """
    if isinstance(exc, mysql_errors.IntegrityError):
        if exc.errno == ER_DUP_ENTRY:
            return DuplicateKeyError(exc.msg)
        if exc.errno == ER_NO_REFERENCED_ROW:
            return MissingReferenceError(exc.msg)
        return exc
    if isinstance(exc, (mysql_errors.InterfaceError, mysql_errors.OperationalError, mysql_errors.PoolError)):
        return StoreUnavailableError("Database is not available, please retry")
    return exc


def open_connection(conn_factory: DatabaseConnection, **kwargs):
    try:
        return conn_factory.connect(**kwargs)
    except mysql.connector.Error as exc:
        logger.error("Could not connect to database: %s", exc)
        raise translate_mysql_error(exc) from exc


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = open_connection(conn_factory)
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        translated = translate_mysql_error(exc)
        if translated is exc:
            raise
        if isinstance(translated, StoreUnavailableError):
            logger.error("Database call failed: %s", exc)
        raise translated from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        # The connection is already gone; nothing was committed.
        logger.warning("Rollback failed: %s", exc)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(float(parts[2])) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")

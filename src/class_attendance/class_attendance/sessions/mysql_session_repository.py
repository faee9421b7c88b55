from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Session, TeacherSession
from .repository import SessionRepository

_SELECT = """
    SELECT s.id, s.teacher_id, s.date, s.time, s.status, s.created_at,
           t.name AS teacher_name
    FROM attendance_sessions s
    LEFT JOIN users t ON t.id = s.teacher_id
"""


def _to_session(r: dict) -> Session:
    return Session(
        session_id=int(r["id"]),
        teacher_id=int(r["teacher_id"]),
        session_date=r["date"],
        start_time=normalize_mysql_time(r["time"]),
        status=SessionStatus(r["status"]),
        created_at=r.get("created_at"),
        teacher_name=r.get("teacher_name"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_active_for_teacher_and_date(self, *, teacher_id: int, session_date: date) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE s.teacher_id=%s AND s.date=%s AND s.status='active'",
                (int(teacher_id), session_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create(self, *, teacher_id: int, session_date: date, start_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(teacher_id, date, time, status)
                VALUES(%s,%s,%s,'active')
                """,
                (int(teacher_id), session_date, start_time),
            )
            return int(cur.lastrowid)

    def close(self, *, session_id: int, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET status='closed'
                WHERE id=%s AND teacher_id=%s AND status='active'
                """,
                (int(session_id), int(teacher_id)),
            )
            return cur.rowcount > 0

    def list_active(self) -> Sequence[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.status='active' ORDER BY s.date DESC, s.time DESC")
            return [_to_session(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: int) -> Sequence[TeacherSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.teacher_id, s.date, s.time, s.status, s.created_at,
                       t.name AS teacher_name,
                       (SELECT COUNT(*) FROM attendance a WHERE a.session_id = s.id) AS attendance_count
                FROM attendance_sessions s
                LEFT JOIN users t ON t.id = s.teacher_id
                WHERE s.teacher_id=%s
                ORDER BY s.date DESC, s.time DESC
                """,
                (int(teacher_id),),
            )
            return [
                TeacherSession(session=_to_session(r), attendance_count=int(r.get("attendance_count") or 0))
                for r in fetchall(cur)
            ]

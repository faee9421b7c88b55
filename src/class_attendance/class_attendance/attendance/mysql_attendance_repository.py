from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.id, a.student_id, a.teacher_id, a.session_id, a.date, a.time_in, a.status, a.created_at,
           s.name AS student_name, t.name AS teacher_name
    FROM attendance a
    LEFT JOIN users s ON s.id = a.student_id
    LEFT JOIN users t ON t.id = a.teacher_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        session_id=int(r["session_id"]) if r.get("session_id") is not None else None,
        work_date=r["date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
        student_name=r.get("student_name"),
        teacher_name=r.get("teacher_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.student_id=%s AND a.session_id=%s", (int(student_id), int(session_id)))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_for_session(self, *, session_id: int, student_id: int, status: AttendanceStatus) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, teacher_id, session_id, date, time_in, status)
                SELECT %s, s.teacher_id, s.id, s.date, s.time, %s
                FROM attendance_sessions s
                WHERE s.id=%s AND s.status='active'
                """,
                (int(student_id), status.value, int(session_id)),
            )
            if cur.rowcount <= 0:
                return None
            return int(cur.lastrowid)

    def upsert_direct(
        self,
        *,
        student_id: int,
        teacher_id: int,
        work_date: date,
        time_in: time,
        status: AttendanceStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(id) makes lastrowid report the existing row on update.
            cur.execute(
                """
                INSERT INTO attendance(student_id, teacher_id, session_id, date, time_in, status)
                VALUES(%s,%s,NULL,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    id=LAST_INSERT_ID(id),
                    teacher_id=VALUES(teacher_id),
                    time_in=VALUES(time_in),
                    status=VALUES(status)
                """,
                (int(student_id), int(teacher_id), work_date, time_in, status.value),
            )
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM attendance WHERE student_id=%s AND date=%s AND session_id IS NULL",
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def list_records(self, *, student_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        where = ""
        params: tuple = ()
        if student_id is not None:
            where = " WHERE a.student_id=%s"
            params = (int(student_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY a.date DESC, a.created_at DESC, a.id DESC", params)
            return [_to_record(r) for r in fetchall(cur)]

    def list_statuses_for_student(self, student_id: int) -> Sequence[AttendanceStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status FROM attendance WHERE student_id=%s", (int(student_id),))
            return [AttendanceStatus(r["status"]) for r in fetchall(cur)]

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.auth.model import Actor
from src.class_attendance.class_attendance.core.enums import AttendanceStatus, Role, SessionStatus
from src.class_attendance.class_attendance.core.exceptions import DuplicateKeyError
from src.class_attendance.class_attendance.sessions.model import Session, TeacherSession
from src.class_attendance.class_attendance.users.model import User

BASE_CREATED_AT = datetime(2024, 3, 1, 8, 0, 0)

ADMIN_ID = 1
TEACHER_ID = 2
OTHER_TEACHER_ID = 3
STUDENT_A_ID = 5
STUDENT_B_ID = 7


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def name_of(self, user_id: int) -> Optional[str]:
        u = self._by_id.get(user_id)
        return u.name if u else None


class InMemorySessions:
    """Emulates attendance_sessions, including the one-active-per-teacher-and-date key."""

    def __init__(self, users: InMemoryUsers, lock: threading.RLock):
        self._users = users
        self._lock = lock
        self._rows: dict[int, Session] = {}
        self._id = 0
        self.attendance: Optional["InMemoryAttendance"] = None

    def _with_name(self, s: Session) -> Session:
        return replace(s, teacher_name=self._users.name_of(s.teacher_id))

    def get_by_id(self, session_id: int) -> Optional[Session]:
        with self._lock:
            s = self._rows.get(int(session_id))
        return self._with_name(s) if s else None

    def get_active_for_teacher_and_date(self, *, teacher_id: int, session_date: date) -> Optional[Session]:
        for s in self._rows.values():
            if s.teacher_id == teacher_id and s.session_date == session_date and s.is_active:
                return self._with_name(s)
        return None

    def create(self, *, teacher_id: int, session_date: date, start_time: time) -> int:
        with self._lock:
            if any(
                s.teacher_id == teacher_id and s.session_date == session_date and s.is_active
                for s in self._rows.values()
            ):
                raise DuplicateKeyError("uq_active_session")
            self._id += 1
            self._rows[self._id] = Session(
                session_id=self._id,
                teacher_id=teacher_id,
                session_date=session_date,
                start_time=start_time,
                status=SessionStatus.ACTIVE,
                created_at=BASE_CREATED_AT + timedelta(seconds=self._id),
            )
            return self._id

    def close(self, *, session_id: int, teacher_id: int) -> bool:
        with self._lock:
            s = self._rows.get(int(session_id))
            if not s or s.teacher_id != teacher_id or not s.is_active:
                return False
            self._rows[s.session_id] = replace(s, status=SessionStatus.CLOSED)
            return True

    def _ordered(self, rows):
        return sorted(rows, key=lambda s: (s.session_date, s.start_time), reverse=True)

    def list_active(self):
        return [self._with_name(s) for s in self._ordered(s for s in self._rows.values() if s.is_active)]

    def list_for_teacher(self, teacher_id: int):
        out = []
        for s in self._ordered(s for s in self._rows.values() if s.teacher_id == teacher_id):
            count = self.attendance.count_for_session(s.session_id) if self.attendance else 0
            out.append(TeacherSession(session=self._with_name(s), attendance_count=count))
        return out

    def raw(self, session_id: int) -> Optional[Session]:
        return self._rows.get(int(session_id))


class InMemoryAttendance:
    """Emulates the attendance table: (student, session) and (student, direct date) unique keys."""

    def __init__(self, users: InMemoryUsers, sessions: InMemorySessions, lock: threading.RLock):
        self._users = users
        self._sessions = sessions
        self._lock = lock
        self._rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def _with_names(self, r: AttendanceRecord) -> AttendanceRecord:
        return replace(
            r,
            student_name=self._users.name_of(r.student_id),
            teacher_name=self._users.name_of(r.teacher_id),
        )

    def _next(self) -> tuple[int, datetime]:
        self._id += 1
        return self._id, BASE_CREATED_AT + timedelta(seconds=self._id)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        r = self._rows.get(int(attendance_id))
        return self._with_names(r) if r else None

    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            for r in self._rows.values():
                if r.student_id == student_id and r.session_id == session_id:
                    return self._with_names(r)
            return None

    def insert_for_session(self, *, session_id: int, student_id: int, status: AttendanceStatus) -> Optional[int]:
        with self._lock:
            s = self._sessions.raw(session_id)
            if not s or not s.is_active:
                return None
            if any(r.student_id == student_id and r.session_id == session_id for r in self._rows.values()):
                raise DuplicateKeyError("uq_session_mark")
            new_id, created_at = self._next()
            self._rows[new_id] = AttendanceRecord(
                attendance_id=new_id,
                student_id=student_id,
                teacher_id=s.teacher_id,
                session_id=s.session_id,
                work_date=s.session_date,
                time_in=s.start_time,
                status=status,
                created_at=created_at,
            )
            return new_id

    def upsert_direct(self, *, student_id, teacher_id, work_date, time_in, status) -> int:
        with self._lock:
            for r in self._rows.values():
                if r.student_id == student_id and r.session_id is None and r.work_date == work_date:
                    self._rows[r.attendance_id] = replace(r, teacher_id=teacher_id, time_in=time_in, status=status)
                    return r.attendance_id
            new_id, created_at = self._next()
            self._rows[new_id] = AttendanceRecord(
                attendance_id=new_id,
                student_id=student_id,
                teacher_id=teacher_id,
                session_id=None,
                work_date=work_date,
                time_in=time_in,
                status=status,
                created_at=created_at,
            )
            return new_id

    def list_records(self, *, student_id: Optional[int] = None):
        rows = [r for r in self._rows.values() if student_id is None or r.student_id == student_id]
        rows.sort(key=lambda r: (r.work_date, r.created_at, r.attendance_id), reverse=True)
        return [self._with_names(r) for r in rows]

    def list_statuses_for_student(self, student_id: int):
        return [r.status for r in self._rows.values() if r.student_id == student_id]

    def count_for_session(self, session_id: int) -> int:
        return sum(1 for r in self._rows.values() if r.session_id == session_id)

    def count(self) -> int:
        return len(self._rows)


class Store:
    def __init__(self):
        lock = threading.RLock()
        self.users = InMemoryUsers(
            [
                User(user_id=ADMIN_ID, name="Admin User", role=Role.ADMIN),
                User(user_id=TEACHER_ID, name="Teacher User", role=Role.TEACHER),
                User(user_id=OTHER_TEACHER_ID, name="Other Teacher", role=Role.TEACHER),
                User(user_id=STUDENT_A_ID, name="Student A", role=Role.STUDENT),
                User(user_id=STUDENT_B_ID, name="Student B", role=Role.STUDENT),
            ]
        )
        self.sessions = InMemorySessions(self.users, lock)
        self.attendance = InMemoryAttendance(self.users, self.sessions, lock)
        self.sessions.attendance = self.attendance


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def teacher() -> Actor:
    return Actor(user_id=TEACHER_ID, role=Role.TEACHER)


@pytest.fixture
def other_teacher() -> Actor:
    return Actor(user_id=OTHER_TEACHER_ID, role=Role.TEACHER)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def student_a() -> Actor:
    return Actor(user_id=STUDENT_A_ID, role=Role.STUDENT)


@pytest.fixture
def student_b() -> Actor:
    return Actor(user_id=STUDENT_B_ID, role=Role.STUDENT)

from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_for_session(self, *, session_id: int, student_id: int, status: AttendanceStatus) -> Optional[int]:
        """Insert a session mark, copying teacher/date/time from the session.

        The insert only happens while the session is still active; returns
        None when it is not. Raises DuplicateKeyError if the student already
        has a mark for the session.
        """

        raise NotImplementedError

    def upsert_direct(
        self,
        *,
        student_id: int,
        teacher_id: int,
        work_date: date,
        time_in: time,
        status: AttendanceStatus,
    ) -> int:
        """Insert or overwrite the session-less mark for (student, date).

        Returns the attendance_id, which stays the same on overwrite.
        """

        raise NotImplementedError

    def list_records(self, *, student_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_statuses_for_student(self, student_id: int) -> Sequence[AttendanceStatus]:
        raise NotImplementedError

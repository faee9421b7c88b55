from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..auth.identity import IdentityVerifier
from ..auth.model import Actor
from ..common.datetime_utils import now_local, require_date, require_time
from ..common.validators import require_choice, require_id
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateKeyError,
    MissingReferenceError,
    NotFoundError,
    StoreUnavailableError,
)
from ..sessions.repository import SessionRepository
from ..users.repository import UserRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_MARKED = "Attendance already marked for this session"
SESSION_NOT_ACTIVE = "Session not found or not active"


class AttendanceService:
    """Use case: record attendance.

    Two separate operations:

    - ``mark_for_session``: a QR scan against an open session. Exactly once
      per (student, session); a repeated scan is a Conflict and the first
      recorded time stands.
    - ``mark_direct``: a teacher-entered mark keyed by (student, date).
      Re-marking overwrites the earlier mark.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        users: UserRepository,
        *,
        identity: Optional[IdentityVerifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._users = users
        self._identity = identity or IdentityVerifier()
        self._clock = clock

    def _require_student(self, student_id: int):
        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        return student

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            # Committed but unreadable.
            raise StoreUnavailableError("Attendance record could not be read back, please retry")
        return record

    def mark_for_session(
        self,
        *,
        actor: Actor,
        session_id: int,
        qr_payload: Optional[str],
        student_id: Optional[int] = None,
    ) -> AttendanceRecord:
        session_id = require_id(session_id, "sessionId")
        claimed = require_id(student_id, "studentId") if student_id not in (None, "") else None

        session = self._sessions.get_by_id(session_id)
        if not session or not session.is_active:
            raise NotFoundError(SESSION_NOT_ACTIVE)

        resolved_id = self._identity.resolve_student_id(qr_payload, actor, claimed_student_id=claimed)
        self._require_student(resolved_id)

        if self._attendance.get_for_student_and_session(student_id=resolved_id, session_id=session_id):
            logger.warning("Repeated scan for student %s in session %s", resolved_id, session_id)
            raise ConflictError(ALREADY_MARKED)

        # Scans are always affirmative; absence is never scan-reported.
        try:
            attendance_id = self._attendance.insert_for_session(
                session_id=session_id, student_id=resolved_id, status=AttendanceStatus.PRESENT
            )
        except DuplicateKeyError:
            logger.warning("Lost race marking student %s in session %s", resolved_id, session_id)
            raise ConflictError(ALREADY_MARKED)
        except MissingReferenceError:
            raise NotFoundError("Student not found")

        if attendance_id is None:
            # Closed between our read and the insert.
            raise NotFoundError(SESSION_NOT_ACTIVE)

        logger.info("Student %s marked present in session %s by %s", resolved_id, session_id, actor.user_id)
        return self._reload(attendance_id)

    def mark_direct(
        self,
        *,
        actor: Actor,
        student_id: int,
        work_date: date | str,
        status: AttendanceStatus | str,
        time_in: time | str | None = None,
    ) -> AttendanceRecord:
        if actor.role != Role.TEACHER:
            raise AuthorizationError("Forbidden - Teacher access required")

        status = require_choice(status, AttendanceStatus, "status")
        student_id = require_id(student_id, "studentId")
        work_date = require_date(work_date, "date")
        if time_in in (None, ""):
            time_in = self._clock().time().replace(microsecond=0)
        else:
            time_in = require_time(time_in, "timeIn")

        self._require_student(student_id)

        try:
            attendance_id = self._attendance.upsert_direct(
                student_id=student_id,
                teacher_id=actor.user_id,
                work_date=work_date,
                time_in=time_in,
                status=status,
            )
        except MissingReferenceError:
            raise NotFoundError("Teacher not found")

        logger.info(
            "Teacher %s marked student %s %s on %s", actor.user_id, student_id, status.value, work_date
        )
        return self._reload(attendance_id)

    def list_records(self, *, actor: Actor) -> Sequence[AttendanceRecord]:
        if actor.role == Role.STUDENT:
            return list(self._attendance.list_records(student_id=actor.user_id))
        return list(self._attendance.list_records())

from __future__ import annotations

import logging
from datetime import date, time
from typing import Sequence

from ..auth.model import Actor
from ..common.datetime_utils import require_date, require_time
from ..common.validators import require_id
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateKeyError,
    MissingReferenceError,
    NotFoundError,
)
from .model import Session, TeacherSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def _require_teacher(actor: Actor) -> None:
    if actor.role != Role.TEACHER:
        raise AuthorizationError("Forbidden - Teacher access required")


class SessionService:
    """Use case: open, list and close attendance sessions.

    Sessions never expire on their own; they stay active until the owning
    teacher closes them.
    """

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    def create_session(self, *, actor: Actor, session_date: date | str, start_time: time | str) -> Session:
        _require_teacher(actor)
        session_date = require_date(session_date, "Date")
        start_time = require_time(start_time, "Time")

        if self._sessions.get_active_for_teacher_and_date(teacher_id=actor.user_id, session_date=session_date):
            raise ConflictError("An active session already exists for this date")

        try:
            session_id = self._sessions.create(
                teacher_id=actor.user_id, session_date=session_date, start_time=start_time
            )
        except DuplicateKeyError:
            # Another request created it between our check and the insert.
            raise ConflictError("An active session already exists for this date")
        except MissingReferenceError:
            raise NotFoundError("Teacher not found")

        logger.info("Session %s opened by teacher %s for %s", session_id, actor.user_id, session_date)
        return self.get_session(session_id)

    def close_session(self, *, actor: Actor, session_id: int) -> None:
        _require_teacher(actor)
        session_id = require_id(session_id, "Session id")

        if not self._sessions.close(session_id=session_id, teacher_id=actor.user_id):
            logger.warning("Teacher %s could not close session %s", actor.user_id, session_id)
            raise NotFoundError("Session not found")

        logger.info("Session %s closed by teacher %s", session_id, actor.user_id)

    def list_active_sessions(self) -> Sequence[Session]:
        return list(self._sessions.list_active())

    def list_teacher_sessions(self, *, actor: Actor) -> Sequence[TeacherSession]:
        _require_teacher(actor)
        return list(self._sessions.list_for_teacher(actor.user_id))

    def get_session(self, session_id: int) -> Session:
        session = self._sessions.get_by_id(require_id(session_id, "Session id"))
        if not session:
            raise NotFoundError("Session not found")
        return session

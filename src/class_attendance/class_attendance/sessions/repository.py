from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import Session, TeacherSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[Session]:
        raise NotImplementedError

    def get_active_for_teacher_and_date(self, *, teacher_id: int, session_date: date) -> Optional[Session]:
        raise NotImplementedError

    def create(self, *, teacher_id: int, session_date: date, start_time: time) -> int:
        """Insert an active session and return its id.

        Raises DuplicateKeyError when the teacher already has an active
        session on that date.
        """

        raise NotImplementedError

    def close(self, *, session_id: int, teacher_id: int) -> bool:
        """Atomically move an owned, active session to closed.

        Returns False when nothing matched (absent, not owned, already closed).
        """

        raise NotImplementedError

    def list_active(self) -> Sequence[Session]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[TeacherSession]:
        raise NotImplementedError

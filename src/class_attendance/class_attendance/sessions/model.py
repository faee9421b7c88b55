from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class Session:
    """Domain entity: a teacher's attendance window for one date."""

    session_id: int
    teacher_id: int
    session_date: date
    start_time: time
    status: SessionStatus
    created_at: Optional[datetime] = None
    teacher_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE


@dataclass(frozen=True)
class TeacherSession:
    """Read-model for a teacher's session list."""

    session: Session
    attendance_count: int

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for a session or a date.

    ``session_id`` is None for marks a teacher entered directly.
    """

    attendance_id: int
    student_id: int
    teacher_id: int
    session_id: Optional[int]
    work_date: date
    time_in: Optional[time]
    status: AttendanceStatus
    created_at: Optional[datetime] = None
    student_name: Optional[str] = None
    teacher_name: Optional[str] = None

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..auth.model import Actor
from ..common.validators import require_id
from ..core.constants import PERCENTAGE_PLACES
from ..core.enums import AttendanceStatus, Role
from .model import StudentStats

_QUANTUM = Decimal(1).scaleb(-PERCENTAGE_PLACES)


def attendance_percentage(present: int, total: int) -> float:
    """present / total * 100, rounded half-up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    value = (Decimal(present) * 100 / Decimal(total)).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    return float(value)


class StatsService:
    """Per-student attendance totals, recomputed from the records on every call."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def compute_stats(self, student_id: int) -> StudentStats:
        statuses = self._attendance.list_statuses_for_student(require_id(student_id, "studentId"))

        total = len(statuses)
        present = sum(1 for s in statuses if s == AttendanceStatus.PRESENT)
        absent = sum(1 for s in statuses if s == AttendanceStatus.ABSENT)
        return StudentStats(
            total=total,
            present=present,
            absent=absent,
            percentage=attendance_percentage(present, total),
        )

    def stats_for_actor(self, *, actor: Actor, student_id: Optional[int] = None) -> StudentStats:
        if actor.role == Role.STUDENT:
            return self.compute_stats(actor.user_id)
        if student_id in (None, ""):
            return StudentStats.empty()
        return self.compute_stats(student_id)

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    STUDENT = "student"
    TEACHER = "teacher"


class SessionStatus(str, Enum):
    """Lifecycle of an attendance session. Only ACTIVE -> CLOSED exists."""

    ACTIVE = "active"
    CLOSED = "closed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"

from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.credentials import CredentialVerifier, JwtCredentialVerifier
from .auth.identity import IdentityVerifier
from .core.constants import DEFAULT_JWT_ALGORITHM
from .database.connection import DBConfig, DatabaseConnection
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .stats.service import StatsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    credential_verifier: CredentialVerifier
    session_service: SessionService
    attendance_service: AttendanceService
    stats_service: StatsService


def wire_container(
    *,
    users_repo: UserRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    credential_verifier: CredentialVerifier,
) -> Container:
    """Build the services on top of already constructed repositories."""
    return Container(
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        credential_verifier=credential_verifier,
        session_service=SessionService(sessions_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            sessions_repo,
            users_repo,
            identity=IdentityVerifier(),
        ),
        stats_service=StatsService(attendance_repo),
    )


def build_container(*, db_config: dict, secret_key: str, jwt_algorithm: str = DEFAULT_JWT_ALGORITHM) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        credential_verifier=JwtCredentialVerifier(secret_key, algorithm=jwt_algorithm),
    )

from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, email, role FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=int(row["id"]),
                name=row["name"],
                role=Role(row["role"]),
                email=row.get("email"),
            )

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user referenced by sessions and attendance records.

    Users are managed outside this package; the core only reads them.
    """

    user_id: int
    name: str
    role: Role
    email: Optional[str] = None

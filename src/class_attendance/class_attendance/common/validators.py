from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_id(value, field_name: str) -> int:
    """Coerce a positive integer id, rejecting blanks, bools and garbage."""
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    try:
        out = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
    if out <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return out


def require_choice(value, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name} (expected one of: {allowed})")

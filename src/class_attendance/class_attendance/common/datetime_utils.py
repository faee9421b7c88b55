from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def require_date(value, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    text = str(value).strip()
    try:
        return parse_iso_date(text)
    except ValueError:
        pass
    try:
        # Full ISO timestamps as sent by browser date pickers.
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_time(value, field_name: str) -> time:
    if isinstance(value, time):
        return value
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_clock_time(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()


def format_date(value: date | None) -> str | None:
    return value.strftime("%Y-%m-%d") if value else None


def format_time(value: time | None) -> str | None:
    return value.strftime("%H:%M:%S") if value else None

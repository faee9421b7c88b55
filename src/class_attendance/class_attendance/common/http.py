from __future__ import annotations

from flask import request

from ..core.exceptions import ValidationError


def json_object_body() -> dict:
    """Parsed request body; an empty dict when absent, ValidationError unless a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("JSON object body required")
    return data

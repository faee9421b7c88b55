"""Resolve which student a QR scan refers to.

A QR payload is whatever text the scanner produced. Badges generated by the
system carry ``{"studentId": <id>}``; older or hand-made codes may only hold a
bare number, so decoding falls back to the first run of digits.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Actor

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")


def decode_student_id(payload: Optional[str]) -> Optional[int]:
    text = (payload or "").strip()
    if not text:
        return None

    try:
        data = json.loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        value = data.get("studentId")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())

    match = _DIGITS.search(text)
    return int(match.group()) if match else None


class IdentityVerifier:
    def resolve_student_id(
        self,
        qr_payload: Optional[str],
        actor: Actor,
        *,
        claimed_student_id: Optional[int] = None,
    ) -> int:
        """Return the student a scan marks attendance for.

        Students may only ever mark themselves: a payload or claim naming
        someone else is Forbidden, and an unreadable payload means a
        self-scan. Teachers and admins mark on someone else's behalf, so the
        decoded id is trusted as-is; with nothing decodable they must supply
        the student explicitly.
        """
        decoded = decode_student_id(qr_payload)

        if actor.role == Role.STUDENT:
            for candidate in (decoded, claimed_student_id):
                if candidate is not None and candidate != actor.user_id:
                    logger.warning(
                        "Student %s presented identity of student %s", actor.user_id, candidate
                    )
                    raise AuthorizationError("QR code does not belong to the signed-in student")
            return actor.user_id

        if actor.is_staff:
            student_id = decoded if decoded is not None else claimed_student_id
            if student_id is None:
                raise ValidationError("studentId missing from QR code")
            return int(student_id)

        raise AuthorizationError("Forbidden")

"""Bearer credential verification.

Issuing credentials (login, signing policy, revocation) belongs to the
identity service in front of this package. ``create_access_token`` only
exists so scripts and tests can mint tokens the verifier accepts.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from jose import JWTError, jwt

from ..core.constants import DEFAULT_JWT_ALGORITHM, DEFAULT_TOKEN_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Actor

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class CredentialVerifier(Protocol):
    def verify(self, credential: str) -> Actor:
        """Return the actor behind a credential or raise AuthenticationError."""

        raise NotImplementedError


def create_access_token(
    *,
    user_id: int,
    role: Role,
    secret_key: str,
    algorithm: str = DEFAULT_JWT_ALGORITHM,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=DEFAULT_TOKEN_TTL_MINUTES))
    claims = {"sub": str(int(user_id)), "role": Role(role).value, "exp": expire}
    return jwt.encode(claims, secret_key, algorithm=algorithm)


class JwtCredentialVerifier(CredentialVerifier):
    def __init__(self, secret_key: str, *, algorithm: str = DEFAULT_JWT_ALGORITHM):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def verify(self, credential: str) -> Actor:
        token = (credential or "").strip()
        if token.lower().startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):].strip()
        if not token:
            raise AuthenticationError("Unauthorized")

        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            logger.warning("Rejected credential: %s", exc)
            raise AuthenticationError("Invalid token")

        try:
            return Actor(user_id=int(claims["sub"]), role=Role(claims["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

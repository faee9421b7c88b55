from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .credentials import CredentialVerifier


def make_actor_required(verifier: CredentialVerifier):
    """Build a view decorator that authenticates the bearer token.

    ``@actor_required()`` accepts any verified actor, ``@actor_required(Role.TEACHER)``
    additionally restricts the role. The actor is exposed as ``g.actor``.
    """

    def actor_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                actor = verifier.verify(request.headers.get("Authorization", ""))
                if roles and actor.role not in roles:
                    names = "/".join(r.value for r in roles)
                    raise AuthorizationError(f"Forbidden - {names} access required")
                g.actor = actor
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return actor_required

"""Mint a bearer token for local testing.

Usage: python scripts/issue_token.py <user_id> <admin|student|teacher>
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.auth.credentials import create_access_token
from src.class_attendance.class_attendance.core.enums import Role


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__.strip().splitlines()[-1])
        return 2

    settings = importlib.import_module(get_settings_module())
    token = create_access_token(
        user_id=int(argv[0]),
        role=Role(argv[1]),
        secret_key=settings.SECRET_KEY,
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
    )
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

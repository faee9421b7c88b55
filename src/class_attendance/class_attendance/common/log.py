from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [class-attendance] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the package logger.

    Safe to call more than once (e.g. one app per test); the handler is only
    added the first time.
    """
    root = logging.getLogger("src.class_attendance")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(getattr(h, "_class_attendance", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._class_attendance = True  # type: ignore[attr-defined]
        root.addHandler(handler)

"""Example: use the service layer without Flask.

Controllers are a thin layer; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)
    for session in container.session_service.list_active_sessions():
        print(session.session_id, session.session_date, session.start_time, session.teacher_name)
    print(container.stats_service.compute_stats(2))


if __name__ == "__main__":
    main()

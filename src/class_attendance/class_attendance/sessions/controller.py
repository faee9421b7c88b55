from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.decorators import make_actor_required
from ..common.datetime_utils import format_date, format_time
from ..common.http import json_object_body
from ..core.enums import Role
from ..container import Container
from .model import Session, TeacherSession


def session_json(s: Session) -> dict:
    return {
        "id": s.session_id,
        "teacherId": s.teacher_id,
        "teacherName": s.teacher_name,
        "date": format_date(s.session_date),
        "time": format_time(s.start_time),
        "status": s.status.value,
        "createdAt": s.created_at.isoformat() if s.created_at else None,
    }


def teacher_session_json(row: TeacherSession) -> dict:
    out = session_json(row.session)
    out["attendanceCount"] = row.attendance_count
    return out


def register(app: Flask, container: Container) -> None:
    actor_required = make_actor_required(container.credential_verifier)

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    @actor_required(Role.TEACHER)
    def sessions_create():
        data = json_object_body()
        session = container.session_service.create_session(
            actor=g.actor,
            session_date=data.get("date"),
            start_time=data.get("time"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Attendance session created successfully",
                "session": session_json(session),
            }
        ), 201

    # Static paths are registered before /<id> so they never parse as an id.
    @app.route("/api/sessions/active", methods=["GET"], endpoint="sessions_active")
    @actor_required()
    def sessions_active():
        return jsonify([session_json(s) for s in container.session_service.list_active_sessions()])

    @app.route("/api/sessions/my-sessions", methods=["GET"], endpoint="sessions_mine")
    @actor_required(Role.TEACHER)
    def sessions_mine():
        rows = container.session_service.list_teacher_sessions(actor=g.actor)
        return jsonify([teacher_session_json(r) for r in rows])

    @app.route("/api/sessions/<int:session_id>", methods=["GET"], endpoint="sessions_get")
    @actor_required()
    def sessions_get(session_id: int):
        return jsonify(session_json(container.session_service.get_session(session_id)))

    @app.route("/api/sessions/<int:session_id>/close", methods=["PUT"], endpoint="sessions_close")
    @actor_required(Role.TEACHER)
    def sessions_close(session_id: int):
        container.session_service.close_session(actor=g.actor, session_id=session_id)
        return jsonify({"success": True, "message": "Session closed successfully"})

from __future__ import annotations

import json
from dataclasses import asdict

from flask import Flask, g, jsonify, request

from ..auth.decorators import make_actor_required
from ..common.datetime_utils import format_date, format_time
from ..common.http import json_object_body
from ..core.enums import Role
from ..container import Container
from .model import AttendanceRecord


def record_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "studentId": r.student_id,
        "studentName": r.student_name,
        "teacherId": r.teacher_id,
        "teacherName": r.teacher_name,
        "sessionId": r.session_id,
        "date": format_date(r.work_date),
        "timeIn": format_time(r.time_in),
        "status": r.status.value,
        "createdAt": r.created_at.isoformat() if r.created_at else None,
    }


def _payload_text(value) -> str | None:
    # Scanners send the decoded text; some clients post the parsed JSON instead.
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def register(app: Flask, container: Container) -> None:
    actor_required = make_actor_required(container.credential_verifier)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @actor_required()
    def attendance_list():
        rows = container.attendance_service.list_records(actor=g.actor)
        return jsonify([record_json(r) for r in rows])

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark_direct")
    @actor_required(Role.TEACHER)
    def attendance_mark_direct():
        data = json_object_body()
        record = container.attendance_service.mark_direct(
            actor=g.actor,
            student_id=data.get("studentId"),
            work_date=data.get("date"),
            status=data.get("status"),
            time_in=data.get("timeIn"),
        )
        return jsonify(record_json(record))

    @app.route("/api/attendance/scan-student", methods=["POST"], endpoint="attendance_scan")
    @actor_required(Role.STUDENT, Role.TEACHER, Role.ADMIN)
    def attendance_scan():
        data = json_object_body()
        qr_data = data.get("qrData")
        record = container.attendance_service.mark_for_session(
            actor=g.actor,
            session_id=data.get("sessionId"),
            qr_payload=_payload_text(qr_data),
            student_id=data.get("studentId"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Attendance marked successfully",
                "record": record_json(record),
            }
        ), 201

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @actor_required()
    def attendance_stats():
        stats = container.stats_service.stats_for_actor(
            actor=g.actor,
            student_id=request.args.get("studentId"),
        )
        return jsonify(asdict(stats))

from __future__ import annotations

import threading
from datetime import date, time

import pytest

from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)
from src.class_attendance.class_attendance.sessions.service import SessionService


def _services(store):
    sessions = SessionService(store.sessions)
    marker = AttendanceService(store.attendance, store.sessions, store.users)
    return sessions, marker


def _open_session(store, teacher, session_date="2024-03-01", start_time="09:00"):
    sessions, _ = _services(store)
    return sessions.create_session(actor=teacher, session_date=session_date, start_time=start_time)


def test_student_scan_records_presence_from_session(store, teacher, student_a):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    record = marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload='{"studentId": 5}')

    assert record.status == AttendanceStatus.PRESENT
    assert record.session_id == session.session_id
    assert record.student_id == 5
    assert record.student_name == "Student A"
    assert record.teacher_id == teacher.user_id
    assert record.work_date == date(2024, 3, 1)
    assert record.time_in == time(9, 0)


def test_repeated_scan_conflicts_and_keeps_one_record(store, teacher, student_a):
    session = _open_session(store, teacher)
    _, marker = _services(store)
    marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload='{"studentId": 5}')

    with pytest.raises(ConflictError):
        marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload='{"studentId": 5}')

    assert store.attendance.count() == 1


def test_scan_with_unreadable_payload_is_a_self_scan(store, teacher, student_a):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    record = marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload="no digits here")

    assert record.student_id == student_a.user_id


def test_student_cannot_scan_someone_elses_code(store, teacher, student_b):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    with pytest.raises(AuthorizationError):
        marker.mark_for_session(actor=student_b, session_id=session.session_id, qr_payload='{"studentId": 5}')

    assert store.attendance.count() == 0


def test_teacher_marks_student_from_scanned_code(store, teacher):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    record = marker.mark_for_session(actor=teacher, session_id=session.session_id, qr_payload="student-7")

    assert record.student_id == 7
    assert record.status == AttendanceStatus.PRESENT


def test_admin_may_mark_on_a_session_they_do_not_own(store, teacher, admin):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    record = marker.mark_for_session(
        actor=admin, session_id=session.session_id, qr_payload="", student_id=5
    )

    assert record.student_id == 5
    assert record.teacher_id == teacher.user_id


def test_teacher_scan_without_any_identity_is_invalid(store, teacher):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    with pytest.raises(ValidationError):
        marker.mark_for_session(actor=teacher, session_id=session.session_id, qr_payload="???")


def test_scan_for_unknown_or_non_student_user_is_not_found(store, teacher):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    with pytest.raises(NotFoundError):
        marker.mark_for_session(actor=teacher, session_id=session.session_id, qr_payload='{"studentId": 99}')
    with pytest.raises(NotFoundError):
        marker.mark_for_session(actor=teacher, session_id=session.session_id, qr_payload='{"studentId": 3}')


def test_scan_against_missing_or_closed_session_is_not_found(store, teacher, student_a):
    sessions, marker = _services(store)
    session = _open_session(store, teacher)
    sessions.close_session(actor=teacher, session_id=session.session_id)

    with pytest.raises(NotFoundError):
        marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload="5")
    with pytest.raises(NotFoundError):
        marker.mark_for_session(actor=student_a, session_id=12345, qr_payload="5")


def test_concurrent_scans_yield_exactly_one_record(store, teacher, student_a):
    session = _open_session(store, teacher)
    _, marker = _services(store)

    workers = 8
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def scan():
        barrier.wait()
        try:
            marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload='{"studentId": 5}')
            result = "ok"
        except ConflictError:
            result = "conflict"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=scan) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == workers - 1
    assert store.attendance.count() == 1


def test_session_closed_between_check_and_insert_is_not_found(store, teacher, student_a):
    sessions, _ = _services(store)
    session = _open_session(store, teacher)

    class ClosesBeforeInsert:
        """Attendance repo that lets the teacher close the session right before the insert."""

        def __init__(self, inner):
            self._inner = inner

        def __getattr__(self, name):
            return getattr(self._inner, name)

        def insert_for_session(self, **kwargs):
            sessions.close_session(actor=teacher, session_id=session.session_id)
            return self._inner.insert_for_session(**kwargs)

    marker = AttendanceService(ClosesBeforeInsert(store.attendance), store.sessions, store.users)

    with pytest.raises(NotFoundError):
        marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload="5")

    assert store.attendance.count() == 0


def test_duplicate_key_from_store_is_conflict(store, teacher, student_a):
    session = _open_session(store, teacher)

    class LosesRace:
        def __init__(self, inner):
            self._inner = inner

        def __getattr__(self, name):
            return getattr(self._inner, name)

        def get_for_student_and_session(self, **kwargs):
            return None

        def insert_for_session(self, **kwargs):
            raise DuplicateKeyError("uq_session_mark")

    marker = AttendanceService(LosesRace(store.attendance), store.sessions, store.users)

    with pytest.raises(ConflictError):
        marker.mark_for_session(actor=student_a, session_id=session.session_id, qr_payload="5")


def test_session_id_is_required(store, student_a):
    _, marker = _services(store)
    with pytest.raises(ValidationError):
        marker.mark_for_session(actor=student_a, session_id=None, qr_payload="5")

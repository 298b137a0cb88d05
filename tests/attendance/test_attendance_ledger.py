from __future__ import annotations

import threading
from datetime import datetime

import pytest

from src.governance_system.governance_system.core.enums import (
    AttendanceAction,
    AttendanceStatus,
    NotificationType,
)
from src.governance_system.governance_system.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def setup(container, make_org, make_event, make_user):
    org_id = make_org()
    event_id = make_event(organization_id=org_id)
    user_id = make_user(name="Ana Reyes", student_id="2023-0001")
    return container.attendance_service, event_id, user_id


def test_first_check_in_creates_present_record(setup, repos, sink):
    service, event_id, user_id = setup
    at = datetime(2026, 3, 10, 8, 5)

    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN, now=at)

    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time == at
    assert record.check_out_time is None
    assert len(repos.attendance.records) == 1

    assert sink.titles_for(user_id) == ["Attendance Recorded"]
    assert sink.sent[0]["type"] == NotificationType.ATTENDANCE
    assert sink.sent[0]["related_id"] == event_id


def test_check_in_twice_keeps_one_record(setup, repos):
    service, event_id, user_id = setup

    first = service.record_attendance(event_id, user_id, "check_in", now=datetime(2026, 3, 10, 8, 0))
    second = service.record_attendance(event_id, user_id, "check_in", now=datetime(2026, 3, 10, 8, 30))

    assert first.attendance_id == second.attendance_id
    assert second.check_in_time == datetime(2026, 3, 10, 8, 30)
    assert len(repos.attendance.records) == 1


def test_check_in_then_check_out(setup):
    service, event_id, user_id = setup

    service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN, now=datetime(2026, 3, 10, 8, 0))
    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_OUT, now=datetime(2026, 3, 10, 12, 0))

    assert record.check_in_time == datetime(2026, 3, 10, 8, 0)
    assert record.check_out_time == datetime(2026, 3, 10, 12, 0)
    assert record.status == AttendanceStatus.PRESENT


def test_check_out_without_check_in_creates_present_record(setup):
    service, event_id, user_id = setup

    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_OUT, now=datetime(2026, 3, 10, 12, 0))

    assert record.check_in_time is None
    assert record.check_out_time == datetime(2026, 3, 10, 12, 0)
    assert record.status == AttendanceStatus.PRESENT


def test_check_out_keeps_manual_status_but_check_in_resets_it(setup):
    service, event_id, user_id = setup
    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN)
    service.update_attendance_status(record.attendance_id, AttendanceStatus.LATE)

    after_out = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_OUT)
    assert after_out.status == AttendanceStatus.LATE

    after_in = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN)
    assert after_in.status == AttendanceStatus.PRESENT


def test_unknown_event_is_not_found(setup, repos, sink):
    service, _, user_id = setup

    with pytest.raises(NotFoundError):
        service.record_attendance(999, user_id, AttendanceAction.CHECK_IN)

    assert repos.attendance.records == {}
    assert sink.sent == []


def test_invalid_action_is_rejected(setup):
    service, event_id, user_id = setup
    with pytest.raises(ValidationError):
        service.record_attendance(event_id, user_id, "teleport")


def test_concurrent_check_ins_create_exactly_one_record(setup, repos):
    service, event_id, user_id = setup
    barrier = threading.Barrier(16)
    errors: list[Exception] = []

    def worker():
        barrier.wait()
        try:
            service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(repos.attendance.records) == 1


def test_failing_notification_does_not_fail_recording(setup, repos, sink, caplog):
    service, event_id, user_id = setup
    sink.fail_for.add(user_id)

    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN)

    assert record.status == AttendanceStatus.PRESENT
    assert len(repos.attendance.records) == 1
    assert "Degraded" in caplog.text


def test_scan_resolves_student_id(setup):
    service, event_id, user_id = setup

    record = service.record_scan(event_id, "2023-0001", AttendanceAction.CHECK_IN)

    assert record.user_id == user_id


def test_scan_with_unknown_code_is_not_found(setup):
    service, event_id, _ = setup
    with pytest.raises(NotFoundError):
        service.record_scan(event_id, "NOPE", AttendanceAction.CHECK_IN)


def test_update_status_notifies_student(setup, sink):
    service, event_id, user_id = setup
    record = service.record_attendance(event_id, user_id, AttendanceAction.CHECK_IN)

    updated = service.update_attendance_status(record.attendance_id, "excused")

    assert updated.status == AttendanceStatus.EXCUSED
    assert sink.sent[-1]["title"] == "Attendance Status Updated"
    assert "excused" in sink.sent[-1]["message"]


def test_update_status_of_missing_record(setup):
    service, _, _ = setup
    with pytest.raises(NotFoundError):
        service.update_attendance_status(42, AttendanceStatus.ABSENT)


def test_list_by_user_is_newest_first(container, make_org, make_event, make_user):
    org_id = make_org()
    first_event = make_event(organization_id=org_id, title="Orientation")
    second_event = make_event(organization_id=org_id, title="Foundation Day")
    user_id = make_user()
    service = container.attendance_service

    service.record_attendance(first_event, user_id, AttendanceAction.CHECK_IN)
    service.record_attendance(second_event, user_id, AttendanceAction.CHECK_IN)

    assert [r.event_id for r in service.list_by_user(user_id)] == [second_event, first_event]

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import AttendanceAction, AttendanceStatus, NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..events.repository import EventRepository
from ..identity.repository import UserRepository
from ..notifications.sink import NotificationSink, emit_best_effort
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance ledger: check-in/check-out recording and status overrides."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        users: UserRepository,
        notifier: NotificationSink,
    ):
        self._attendance = attendance
        self._events = events
        self._users = users
        self._notifier = notifier

    def record_attendance(
        self,
        event_id: int,
        user_id: int,
        action: AttendanceAction,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        try:
            action = AttendanceAction(action)
        except ValueError:
            raise ValidationError("Action must be check_in or check_out")

        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        now = now or now_local()
        attendance_id = self._attendance.record(
            event_id=event.event_id,
            user_id=int(user_id),
            action=action,
            at=now,
        )
        logger.info("Attendance %s: %s for user %s at event %s", attendance_id, action.value, user_id, event.event_id)

        verb = "check-in" if action == AttendanceAction.CHECK_IN else "check-out"
        emit_best_effort(
            self._notifier,
            int(user_id),
            "Attendance Recorded",
            f"Your {verb} for {event.title} has been recorded.",
            NotificationType.ATTENDANCE,
            event.event_id,
        )

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def record_scan(
        self,
        event_id: int,
        student_id: str,
        action: AttendanceAction,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Record attendance from a scanned QR payload (the student's ID)."""
        student_id = require_non_empty(student_id, "QR code")
        user = self._users.get_by_student_id(student_id)
        if not user:
            raise NotFoundError("Student not found for scanned code")
        return self.record_attendance(event_id, user.user_id, action, now=now)

    def update_attendance_status(self, attendance_id: int, status: AttendanceStatus) -> AttendanceRecord:
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError("Unknown attendance status")

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        self._attendance.update_status(record.attendance_id, status=status)
        logger.info("Attendance %s status set to %s", record.attendance_id, status.value)

        emit_best_effort(
            self._notifier,
            record.user_id,
            "Attendance Status Updated",
            f"Your attendance status has been updated to {status.value}.",
            NotificationType.ATTENDANCE,
            record.event_id,
        )
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            event_id=record.event_id,
            user_id=record.user_id,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            status=status,
            created_at=record.created_at,
        )

    def list_by_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("Event not found")
        return self._attendance.list_by_event(int(event_id))

    def list_by_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_user(int(user_id))

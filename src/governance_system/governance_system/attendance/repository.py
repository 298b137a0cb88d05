from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceAction, AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def record(self, *, event_id: int, user_id: int, action: AttendanceAction, at: datetime) -> int:
        """Atomic insert-if-absent-else-update on (event_id, user_id).

        - absent: insert with status=present and the timestamp for `action`
        - check_in on existing: set check_in_time, force status=present
        - check_out on existing: set check_out_time, keep status

        Returns attendance_id.
        """

        raise NotImplementedError

    def update_status(self, attendance_id: int, *, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def list_by_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceAction, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, event_id, user_id, check_in_time, check_out_time, status, created_at"

# UNIQUE(event_id, user_id) turns the insert into an update for an existing pair.
# LAST_INSERT_ID(attendance_id) makes lastrowid report the existing row's id.
_UPSERT_CHECK_IN = """
    INSERT INTO attendance(event_id, user_id, check_in_time, status)
    VALUES(%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        check_in_time=VALUES(check_in_time),
        status=VALUES(status),
        attendance_id=LAST_INSERT_ID(attendance_id)
"""

_UPSERT_CHECK_OUT = """
    INSERT INTO attendance(event_id, user_id, check_out_time, status)
    VALUES(%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        check_out_time=VALUES(check_out_time),
        attendance_id=LAST_INSERT_ID(attendance_id)
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def record(self, *, event_id: int, user_id: int, action: AttendanceAction, at: datetime) -> int:
        sql = _UPSERT_CHECK_IN if action == AttendanceAction.CHECK_IN else _UPSERT_CHECK_OUT
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(event_id), int(user_id), at, AttendanceStatus.PRESENT.value))
            return int(cur.lastrowid)

    def update_status(self, attendance_id: int, *, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET status=%s WHERE attendance_id=%s",
                (status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_by_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE event_id=%s
                ORDER BY created_at ASC, attendance_id ASC
                """,
                (int(event_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_by_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s
                ORDER BY created_at DESC, attendance_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

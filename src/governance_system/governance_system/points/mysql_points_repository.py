from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PointEntry
from .repository import PointsRepository


class MySQLPointsRepository(PointsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, user_id: int, points: int, reason: str, assigned_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_points(user_id, points, reason, assigned_by)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), int(points), reason, int(assigned_by)),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[PointEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, user_id, points, reason, assigned_by, created_at
                FROM student_points
                WHERE user_id=%s
                ORDER BY created_at DESC, entry_id DESC
                """,
                (int(user_id),),
            )
            return [
                PointEntry(
                    entry_id=int(r["entry_id"]),
                    user_id=int(r["user_id"]),
                    points=int(r["points"]),
                    reason=r["reason"],
                    assigned_by=int(r["assigned_by"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def total_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COALESCE(SUM(points), 0) AS total FROM student_points WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

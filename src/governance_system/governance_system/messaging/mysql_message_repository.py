from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Message
from .repository import MessageRepository

_COLUMNS = "message_id, sender_id, receiver_id, content, `read`, created_at"


def _row_to_message(r: dict) -> Message:
    return Message(
        message_id=int(r["message_id"]),
        sender_id=int(r["sender_id"]),
        receiver_id=int(r["receiver_id"]),
        content=r["content"],
        read=bool(r["read"]),
        created_at=r.get("created_at"),
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, sender_id: int, receiver_id: int, content: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO messages(sender_id, receiver_id, content) VALUES(%s,%s,%s)",
                (int(sender_id), int(receiver_id), content),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE sender_id=%s OR receiver_id=%s
                ORDER BY created_at DESC, message_id DESC
                """,
                (int(user_id), int(user_id)),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def list_thread(self, user_id: int, partner_id: int) -> Sequence[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE (sender_id=%s AND receiver_id=%s) OR (sender_id=%s AND receiver_id=%s)
                ORDER BY created_at ASC, message_id ASC
                """,
                (int(user_id), int(partner_id), int(partner_id), int(user_id)),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def mark_read(self, message_ids: Sequence[int]) -> int:
        ids = [int(m) for m in message_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE messages SET `read`=1 WHERE message_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return int(cur.rowcount)

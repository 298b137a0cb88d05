from __future__ import annotations

from typing import Protocol, Sequence

from .model import Message


class MessageRepository(Protocol):
    def create(self, *, sender_id: int, receiver_id: int, content: str) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Message]:
        """Every message sent or received by the user, newest first."""

        raise NotImplementedError

    def list_thread(self, user_id: int, partner_id: int) -> Sequence[Message]:
        """Messages between the two users, oldest first."""

        raise NotImplementedError

    def mark_read(self, message_ids: Sequence[int]) -> int:
        raise NotImplementedError

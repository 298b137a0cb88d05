from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Message:
    message_id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool = False
    created_at: Optional[datetime] = None

    def partner_of(self, user_id: int) -> int:
        return self.receiver_id if self.sender_id == user_id else self.sender_id


@dataclass(frozen=True)
class ConversationPreview:
    """Latest message exchanged with one partner."""

    partner_id: int
    last_message: Message
    unread: bool

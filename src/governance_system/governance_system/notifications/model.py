from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime
    related_id: Optional[int] = None


@dataclass(frozen=True)
class OutgoingNotification:
    """A notification waiting to be written by a sink."""

    user_id: int
    title: str
    message: str
    type: NotificationType
    related_id: Optional[int] = None

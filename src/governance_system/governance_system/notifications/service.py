from __future__ import annotations

from typing import Sequence

from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.exceptions import NotFoundError
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    """Recipient read-path: list, count, mark read."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_notifications(self, *, user_id: int, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), limit=max(1, int(limit)))

    def unread_count(self, *, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

    def mark_as_read(self, *, notification_id: int, user_id: int) -> None:
        n = self._notifications.get_by_id(int(notification_id))
        # Another user's notification is reported as missing.
        if not n or n.user_id != int(user_id):
            raise NotFoundError("Notification not found")
        if not n.read:
            self._notifications.mark_read(n.notification_id)

    def mark_all_as_read(self, *, user_id: int) -> int:
        return self._notifications.mark_all_read(int(user_id))

"""Notification side channel.

Producers (attendance, clearances, points, messaging) hand notifications to a
sink and never wait on delivery. A sink must not raise to its caller.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Protocol

from ..core.constants import DEFAULT_NOTIFICATION_QUEUE_SIZE
from ..core.enums import NotificationType
from .model import OutgoingNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def emit(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[int] = None,
    ) -> None:
        raise NotImplementedError


def emit_best_effort(
    sink: NotificationSink,
    user_id: int,
    title: str,
    message: str,
    type: NotificationType,
    related_id: Optional[int] = None,
) -> bool:
    """Emit through `sink`, logging instead of raising. Returns False on failure."""
    try:
        sink.emit(int(user_id), title, message, type, related_id)
        return True
    except Exception:
        logger.exception("Degraded: notification %r to user %s was not emitted", title, user_id)
        return False


class DirectNotificationSink(NotificationSink):
    """Writes synchronously to the repository; failures are logged."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def emit(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[int] = None,
    ) -> None:
        _deliver(
            self._notifications,
            OutgoingNotification(user_id=int(user_id), title=title, message=message, type=type, related_id=related_id),
        )


class QueuedNotificationSink(NotificationSink):
    """Hands notifications to a background worker through a bounded queue.

    `emit` only enqueues, so the caller's transaction is never coupled to
    delivery latency. When the queue is full the notification is dropped
    with a warning.
    """

    _STOP = object()

    def __init__(
        self,
        notifications: NotificationRepository,
        *,
        maxsize: int = DEFAULT_NOTIFICATION_QUEUE_SIZE,
        start: bool = True,
    ):
        self._notifications = notifications
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=int(maxsize))
        self._worker: Optional[threading.Thread] = None
        if start:
            self.start()

    def start(self) -> None:
        if self._worker and self._worker.is_alive():
            return
        self._worker = threading.Thread(target=self._run, name="notification-sink", daemon=True)
        self._worker.start()

    def emit(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        related_id: Optional[int] = None,
    ) -> None:
        item = OutgoingNotification(user_id=int(user_id), title=title, message=message, type=type, related_id=related_id)
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            logger.warning("Degraded: notification queue full, dropping %r for user %s", title, user_id)

    def flush(self) -> None:
        """Block until every queued notification has been processed."""
        self._queue.join()

    def close(self, timeout: Optional[float] = None) -> None:
        if not self._worker:
            return
        self._queue.put(self._STOP)
        self._worker.join(timeout)
        self._worker = None

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is self._STOP:
                    return
                _deliver(self._notifications, item)
            finally:
                self._queue.task_done()


def _deliver(notifications: NotificationRepository, item: OutgoingNotification) -> None:
    try:
        notifications.create(
            user_id=item.user_id,
            title=item.title,
            message=item.message,
            type=item.type,
            related_id=item.related_id,
        )
    except Exception:
        logger.exception("Degraded: failed to store notification %r for user %s", item.title, item.user_id)

from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.repository import UserRepository
from ..notifications.sink import NotificationSink, emit_best_effort
from .model import PointEntry
from .repository import PointsRepository

logger = logging.getLogger(__name__)


class PointsService:
    def __init__(self, points: PointsRepository, users: UserRepository, notifier: NotificationSink):
        self._points = points
        self._users = users
        self._notifier = notifier

    def award_points(self, *, user_id: int, points: int, reason: str, assigned_by: int) -> int:
        """Append a ledger entry. Negative points are deductions."""
        if isinstance(points, bool) or not isinstance(points, int):
            raise ValidationError("Points must be an integer")
        reason = require_non_empty(reason, "Reason")
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

        entry_id = self._points.add(user_id=int(user_id), points=points, reason=reason, assigned_by=int(assigned_by))
        logger.info("Points entry %s: %+d for user %s by %s", entry_id, points, user_id, assigned_by)

        emit_best_effort(
            self._notifier,
            int(user_id),
            "Points Awarded",
            f"You have been awarded {points} points for: {reason}",
            NotificationType.SYSTEM,
        )
        return entry_id

    def total_points(self, user_id: int) -> int:
        return self._points.total_for_user(int(user_id))

    def list_points(self, user_id: int) -> Sequence[PointEntry]:
        return self._points.list_for_user(int(user_id))

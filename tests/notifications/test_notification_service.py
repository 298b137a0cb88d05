from __future__ import annotations

import pytest

from src.governance_system.governance_system.core.enums import NotificationType
from src.governance_system.governance_system.core.exceptions import NotFoundError


def _seed(repos, user_id: int, count: int) -> list[int]:
    return [
        repos.notifications.create(user_id=user_id, title=f"n{i}", message="m", type=NotificationType.EVENT)
        for i in range(count)
    ]


def test_list_is_newest_first_and_limited(container, repos):
    _seed(repos, 1, 25)

    items = container.notification_service.list_notifications(user_id=1)

    assert len(items) == 20
    assert items[0].title == "n24"


def test_mark_read_and_unread_count(container, repos):
    ids = _seed(repos, 1, 3)
    service = container.notification_service

    service.mark_as_read(notification_id=ids[0], user_id=1)
    assert service.unread_count(user_id=1) == 2

    assert service.mark_all_as_read(user_id=1) == 2
    assert service.unread_count(user_id=1) == 0


def test_cannot_mark_someone_elses_notification(container, repos):
    (nid,) = _seed(repos, 1, 1)
    with pytest.raises(NotFoundError):
        container.notification_service.mark_as_read(notification_id=nid, user_id=2)

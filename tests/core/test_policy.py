from __future__ import annotations

import pytest

from src.governance_system.governance_system.core.enums import Role
from src.governance_system.governance_system.core.exceptions import AuthorizationError
from src.governance_system.governance_system.core.policy import Operation, can_access_user_data, is_allowed, require


@pytest.mark.parametrize(
    "role, operation, allowed",
    [
        (Role.STUDENT, Operation.REQUEST_CLEARANCE, True),
        (Role.STUDENT, Operation.SEND_MESSAGE, True),
        (Role.STUDENT, Operation.RECORD_ATTENDANCE, False),
        (Role.STUDENT, Operation.DECIDE_CLEARANCE, False),
        (Role.STUDENT, Operation.AWARD_POINTS, False),
        (Role.OFFICER, Operation.RECORD_ATTENDANCE, True),
        (Role.OFFICER, Operation.LIST_EVENT_ATTENDANCE, True),
        (Role.OFFICER, Operation.UPDATE_ATTENDANCE_STATUS, False),
        (Role.CLUB_ADMIN, Operation.DECIDE_CLEARANCE, True),
        (Role.DEPARTMENT_ADMIN, Operation.AWARD_POINTS, True),
        (Role.CLUB_ADMIN, Operation.MANAGE_ORGANIZATIONS, False),
        (Role.CLUB_ADMIN, Operation.CHANGE_USER_ROLE, False),
        (Role.SSG_ADMIN, Operation.CHANGE_USER_ROLE, True),
        (Role.SSG_ADMIN, Operation.MANAGE_ORGANIZATIONS, True),
    ],
)
def test_permission_matrix(role, operation, allowed):
    assert is_allowed(role, operation) is allowed


def test_ssg_admin_may_do_everything():
    assert all(is_allowed(Role.SSG_ADMIN, op) for op in Operation)


def test_roles_accept_raw_values():
    assert is_allowed("officer", Operation.RECORD_ATTENDANCE)


def test_require_raises_forbidden():
    with pytest.raises(AuthorizationError):
        require(Role.STUDENT, Operation.AWARD_POINTS)


def test_self_scoped_reads():
    assert can_access_user_data(Role.STUDENT, actor_id=3, owner_id=3)
    assert not can_access_user_data(Role.STUDENT, actor_id=3, owner_id=4)
    assert not can_access_user_data(Role.OFFICER, actor_id=3, owner_id=4)
    assert can_access_user_data(Role.CLUB_ADMIN, actor_id=3, owner_id=4)

"""Role based capability checks.

Evaluated once at the boundary (controllers) before any service operation runs,
so services receive an already-authorized principal.
"""

from __future__ import annotations

from enum import Enum

from .enums import Role
from .exceptions import AuthorizationError


class Operation(str, Enum):
    # Attendance
    RECORD_ATTENDANCE = "record_attendance"
    UPDATE_ATTENDANCE_STATUS = "update_attendance_status"
    LIST_EVENT_ATTENDANCE = "list_event_attendance"
    VIEW_OWN_ATTENDANCE = "view_own_attendance"

    # Clearances
    REQUEST_CLEARANCE = "request_clearance"
    DECIDE_CLEARANCE = "decide_clearance"
    LIST_ORGANIZATION_CLEARANCES = "list_organization_clearances"
    VIEW_OWN_CLEARANCES = "view_own_clearances"

    # Points
    AWARD_POINTS = "award_points"
    VIEW_OWN_POINTS = "view_own_points"

    # Messaging / notifications
    SEND_MESSAGE = "send_message"
    READ_MESSAGES = "read_messages"
    READ_NOTIFICATIONS = "read_notifications"

    # Events
    VIEW_EVENTS = "view_events"
    MANAGE_EVENTS = "manage_events"

    # Administration
    MANAGE_ORGANIZATIONS = "manage_organizations"
    CHANGE_USER_ROLE = "change_user_role"
    VIEW_ANY_USER_DATA = "view_any_user_data"


_STUDENT = frozenset(
    {
        Operation.VIEW_OWN_ATTENDANCE,
        Operation.REQUEST_CLEARANCE,
        Operation.VIEW_OWN_CLEARANCES,
        Operation.VIEW_OWN_POINTS,
        Operation.SEND_MESSAGE,
        Operation.READ_MESSAGES,
        Operation.READ_NOTIFICATIONS,
        Operation.VIEW_EVENTS,
    }
)

_OFFICER = _STUDENT | {
    Operation.RECORD_ATTENDANCE,
    Operation.LIST_EVENT_ATTENDANCE,
}

_ORG_ADMIN = _OFFICER | {
    Operation.UPDATE_ATTENDANCE_STATUS,
    Operation.DECIDE_CLEARANCE,
    Operation.LIST_ORGANIZATION_CLEARANCES,
    Operation.AWARD_POINTS,
    Operation.MANAGE_EVENTS,
    Operation.VIEW_ANY_USER_DATA,
}

_PERMISSIONS: dict[Role, frozenset[Operation]] = {
    Role.STUDENT: _STUDENT,
    Role.OFFICER: frozenset(_OFFICER),
    Role.CLUB_ADMIN: frozenset(_ORG_ADMIN),
    Role.DEPARTMENT_ADMIN: frozenset(_ORG_ADMIN),
    Role.SSG_ADMIN: frozenset(Operation),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    """Pure capability check: may `role` perform `operation`?"""
    return operation in _PERMISSIONS.get(Role(role), frozenset())


def can_access_user_data(role: Role, *, actor_id: int, owner_id: int) -> bool:
    """Self-scoped reads: owners always, otherwise only roles with the admin-read capability."""
    if int(actor_id) == int(owner_id):
        return True
    return is_allowed(role, Operation.VIEW_ANY_USER_DATA)


def require(role: Role, operation: Operation) -> None:
    if not is_allowed(role, operation):
        raise AuthorizationError(f"Role '{Role(role).value}' may not perform '{operation.value}'")

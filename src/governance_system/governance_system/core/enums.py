from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SSG_ADMIN = "ssg_admin"
    CLUB_ADMIN = "club_admin"
    DEPARTMENT_ADMIN = "department_admin"
    OFFICER = "officer"
    STUDENT = "student"


class OrganizationType(str, Enum):
    SSG = "ssg"
    DEPARTMENT = "department"
    CLUB = "club"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"


class AttendanceAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ClearanceStatus(str, Enum):
    """States of the per-organization clearance workflow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    EVENT = "event"
    ATTENDANCE = "attendance"
    CLEARANCE = "clearance"
    MESSAGE = "message"
    SYSTEM = "system"

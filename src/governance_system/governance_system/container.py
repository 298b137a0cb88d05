from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .clearances.mysql_clearance_repository import MySQLClearanceRepository
from .clearances.repository import ClearanceRepository
from .clearances.service import ClearanceService
from .core.constants import DEFAULT_NOTIFICATION_QUEUE_SIZE, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .identity.mysql_user_repository import MySQLUserRepository
from .identity.repository import UserRepository
from .identity.service import AuthService, IdentityGateway, UserService
from .messaging.mysql_message_repository import MySQLMessageRepository
from .messaging.repository import MessageRepository
from .messaging.service import MessagingService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .notifications.sink import NotificationSink, QueuedNotificationSink
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .organizations.service import OrganizationDirectory, OrganizationService
from .points.mysql_points_repository import MySQLPointsRepository
from .points.repository import PointsRepository
from .points.service import PointsService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    organizations_repo: OrganizationRepository
    events_repo: EventRepository
    attendance_repo: AttendanceRepository
    clearances_repo: ClearanceRepository
    points_repo: PointsRepository
    messages_repo: MessageRepository
    notifications_repo: NotificationRepository

    notifier: NotificationSink
    identity_gateway: IdentityGateway

    auth_service: AuthService
    user_service: UserService
    organization_service: OrganizationService
    event_service: EventService
    attendance_service: AttendanceService
    clearance_service: ClearanceService
    points_service: PointsService
    messaging_service: MessagingService
    notification_service: NotificationService

    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    users_repo: UserRepository,
    organizations_repo: OrganizationRepository,
    events_repo: EventRepository,
    attendance_repo: AttendanceRepository,
    clearances_repo: ClearanceRepository,
    points_repo: PointsRepository,
    messages_repo: MessageRepository,
    notifications_repo: NotificationRepository,
    notifier: NotificationSink,
    secret_key: str,
    token_max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""
    identity_gateway = IdentityGateway(users_repo, secret_key=secret_key, max_age=token_max_age)
    directory = OrganizationDirectory(organizations_repo)

    return Container(
        users_repo=users_repo,
        organizations_repo=organizations_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        clearances_repo=clearances_repo,
        points_repo=points_repo,
        messages_repo=messages_repo,
        notifications_repo=notifications_repo,
        notifier=notifier,
        identity_gateway=identity_gateway,
        auth_service=AuthService(users_repo, identity_gateway),
        user_service=UserService(users_repo),
        organization_service=OrganizationService(organizations_repo, users_repo),
        event_service=EventService(events_repo, organizations_repo, users_repo),
        attendance_service=AttendanceService(attendance_repo, events_repo, users_repo, notifier),
        clearance_service=ClearanceService(clearances_repo, directory, notifier),
        points_service=PointsService(points_repo, users_repo, notifier),
        messaging_service=MessagingService(messages_repo, users_repo, notifier),
        notification_service=NotificationService(notifications_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    notification_queue_size: int = DEFAULT_NOTIFICATION_QUEUE_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    notifications_repo = MySQLNotificationRepository(conn)

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        organizations_repo=MySQLOrganizationRepository(conn),
        events_repo=MySQLEventRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        clearances_repo=MySQLClearanceRepository(conn),
        points_repo=MySQLPointsRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        notifications_repo=notifications_repo,
        notifier=QueuedNotificationSink(notifications_repo, maxsize=notification_queue_size),
        secret_key=secret_key,
        token_max_age=token_max_age,
        conn=conn,
    )

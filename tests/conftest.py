from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.governance_system.governance_system.attendance.model import AttendanceRecord
from src.governance_system.governance_system.clearances.model import Clearance
from src.governance_system.governance_system.container import wire_container
from src.governance_system.governance_system.core.enums import (
    AttendanceAction,
    AttendanceStatus,
    ClearanceStatus,
    OrganizationType,
    Role,
)
from src.governance_system.governance_system.events.model import Event, EventDraft
from src.governance_system.governance_system.identity.model import User
from src.governance_system.governance_system.messaging.model import Message
from src.governance_system.governance_system.notifications.model import Notification
from src.governance_system.governance_system.organizations.model import Membership, Organization
from src.governance_system.governance_system.points.model import PointEntry

_BASE_TIME = datetime(2026, 3, 2, 8, 0, 0)


class FakeClock:
    """Strictly increasing timestamps so newest-first ordering is deterministic."""

    def __init__(self):
        self._ticks = itertools.count()
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            return _BASE_TIME + timedelta(seconds=next(self._ticks))


class InMemoryUsers:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self.users: dict[int, User] = {}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_student_id(self, student_id: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.student_id == student_id), None)

    def create_user(self, *, name, email, password_hash, role, department, student_id) -> int:
        uid = next(self._ids)
        self.users[uid] = User(
            user_id=uid,
            name=name,
            email=email,
            password_hash=password_hash,
            role=Role(role),
            department=department,
            student_id=student_id,
            created_at=self._clock(),
        )
        return uid

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.user_id, reverse=True)

    def update_role(self, user_id: int, *, role: Role) -> bool:
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, role=Role(role))
        return True

    def update_profile(self, user_id: int, *, name, department, student_id) -> bool:
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, name=name, department=department, student_id=student_id)
        return True

    def set_qr_code(self, user_id: int, *, qr_code: str) -> bool:
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, qr_code=qr_code)
        return True

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, password_hash=password_hash)
        return True


class InMemoryOrganizations:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self.orgs: dict[int, Organization] = {}
        self.members: dict[tuple[int, int], Membership] = {}

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        return self.orgs.get(int(organization_id))

    def list_all(self):
        return sorted(self.orgs.values(), key=lambda o: o.name)

    def create(self, *, name, type, department) -> int:
        oid = next(self._ids)
        self.orgs[oid] = Organization(oid, name, OrganizationType(type), department, self._clock())
        return oid

    def update(self, organization_id: int, *, name, type, department) -> bool:
        org = self.orgs.get(int(organization_id))
        if not org:
            return False
        self.orgs[org.organization_id] = replace(org, name=name, type=type, department=department)
        return True

    def get_membership(self, *, organization_id, user_id) -> Optional[Membership]:
        return self.members.get((int(organization_id), int(user_id)))

    def list_members(self, organization_id: int):
        return [m for (oid, _), m in sorted(self.members.items()) if oid == int(organization_id)]

    def list_admin_ids(self, organization_id: int):
        return [m.user_id for m in self.list_members(organization_id) if m.is_admin]

    def add_member(self, *, organization_id, user_id, is_admin) -> bool:
        key = (int(organization_id), int(user_id))
        if key in self.members:
            return False
        self.members[key] = Membership(key[0], key[1], bool(is_admin))
        return True

    def remove_member(self, *, organization_id, user_id) -> bool:
        return self.members.pop((int(organization_id), int(user_id)), None) is not None

    def set_member_admin(self, *, organization_id, user_id, is_admin) -> bool:
        key = (int(organization_id), int(user_id))
        if key not in self.members:
            return False
        self.members[key] = replace(self.members[key], is_admin=bool(is_admin))
        return True


class InMemoryEvents:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self.events: dict[int, Event] = {}

    def get_by_id(self, event_id: int) -> Optional[Event]:
        return self.events.get(int(event_id))

    def list_all(self):
        return sorted(self.events.values(), key=lambda e: (e.event_date, e.start_time, e.event_id))

    def create(self, draft: EventDraft) -> int:
        eid = next(self._ids)
        self.events[eid] = Event(event_id=eid, created_at=self._clock(), **draft.__dict__)
        return eid

    def update(self, event_id: int, draft: EventDraft) -> bool:
        event = self.events.get(int(event_id))
        if not event:
            return False
        self.events[event.event_id] = replace(event, **draft.__dict__)
        return True

    def delete(self, event_id: int) -> bool:
        return self.events.pop(int(event_id), None) is not None

    def set_officers(self, event_id: int, officer_ids) -> None:
        event = self.events[int(event_id)]
        self.events[event.event_id] = replace(event, officer_ids=tuple(officer_ids))


class InMemoryAttendance:
    """Upserts under a lock, like the unique (event_id, user_id) key does in MySQL."""

    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.records: dict[int, AttendanceRecord] = {}

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def _find(self, *, event_id, user_id) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.event_id == int(event_id) and r.user_id == int(user_id)),
            None,
        )

    def record(self, *, event_id, user_id, action, at) -> int:
        with self._lock:
            existing = self._find(event_id=event_id, user_id=user_id)
            if existing is None:
                aid = next(self._ids)
                self.records[aid] = AttendanceRecord(
                    attendance_id=aid,
                    event_id=int(event_id),
                    user_id=int(user_id),
                    check_in_time=at if action == AttendanceAction.CHECK_IN else None,
                    check_out_time=at if action == AttendanceAction.CHECK_OUT else None,
                    status=AttendanceStatus.PRESENT,
                    created_at=self._clock(),
                )
                return aid
            if action == AttendanceAction.CHECK_IN:
                updated = replace(existing, check_in_time=at, status=AttendanceStatus.PRESENT)
            else:
                updated = replace(existing, check_out_time=at)
            self.records[existing.attendance_id] = updated
            return existing.attendance_id

    def update_status(self, attendance_id: int, *, status) -> bool:
        rec = self.records.get(int(attendance_id))
        if not rec:
            return False
        self.records[rec.attendance_id] = replace(rec, status=status)
        return True

    def list_by_event(self, event_id: int):
        return sorted((r for r in self.records.values() if r.event_id == int(event_id)), key=lambda r: r.created_at)

    def list_by_user(self, user_id: int):
        return sorted(
            (r for r in self.records.values() if r.user_id == int(user_id)),
            key=lambda r: r.created_at,
            reverse=True,
        )


class InMemoryClearances:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.clearances: dict[int, Clearance] = {}

    def get_by_id(self, clearance_id: int) -> Optional[Clearance]:
        return self.clearances.get(int(clearance_id))

    def _find_pair(self, *, user_id, organization_id) -> Optional[Clearance]:
        return next(
            (
                c
                for c in self.clearances.values()
                if c.user_id == int(user_id) and c.organization_id == int(organization_id)
            ),
            None,
        )

    def open_request(self, *, user_id, organization_id) -> Optional[int]:
        with self._lock:
            existing = self._find_pair(user_id=user_id, organization_id=organization_id)
            if existing is None:
                cid = next(self._ids)
                self.clearances[cid] = Clearance(
                    clearance_id=cid,
                    user_id=int(user_id),
                    organization_id=int(organization_id),
                    status=ClearanceStatus.PENDING,
                    created_at=self._clock(),
                )
                return cid
            if existing.status != ClearanceStatus.REJECTED:
                return None
            self.clearances[existing.clearance_id] = replace(
                existing,
                status=ClearanceStatus.PENDING,
                remarks=None,
                transaction_code=None,
                updated_at=self._clock(),
            )
            return existing.clearance_id

    def decide(self, clearance_id, *, status, remarks, transaction_code) -> bool:
        with self._lock:
            c = self.clearances.get(int(clearance_id))
            if not c or c.status != ClearanceStatus.PENDING:
                return False
            self.clearances[c.clearance_id] = replace(
                c,
                status=status,
                remarks=remarks,
                transaction_code=transaction_code,
                updated_at=self._clock(),
            )
            return True

    def list_by_user(self, user_id: int):
        return sorted(
            (c for c in self.clearances.values() if c.user_id == int(user_id)),
            key=lambda c: c.created_at,
            reverse=True,
        )

    def list_by_organization(self, organization_id: int):
        return sorted(
            (c for c in self.clearances.values() if c.organization_id == int(organization_id)),
            key=lambda c: c.created_at,
            reverse=True,
        )

    def list_pending(self):
        return sorted(
            (c for c in self.clearances.values() if c.status == ClearanceStatus.PENDING),
            key=lambda c: c.created_at,
            reverse=True,
        )


class InMemoryPoints:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self.entries: list[PointEntry] = []

    def add(self, *, user_id, points, reason, assigned_by) -> int:
        eid = next(self._ids)
        self.entries.append(PointEntry(eid, int(user_id), int(points), reason, int(assigned_by), self._clock()))
        return eid

    def list_for_user(self, user_id: int):
        return sorted((e for e in self.entries if e.user_id == int(user_id)), key=lambda e: e.created_at, reverse=True)

    def total_for_user(self, user_id: int) -> int:
        return sum(e.points for e in self.entries if e.user_id == int(user_id))


class InMemoryMessages:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self.messages: dict[int, Message] = {}
        self.mark_read_calls: list[list[int]] = []

    def create(self, *, sender_id, receiver_id, content) -> int:
        mid = next(self._ids)
        self.messages[mid] = Message(mid, int(sender_id), int(receiver_id), content, False, self._clock())
        return mid

    def list_for_user(self, user_id: int):
        uid = int(user_id)
        return sorted(
            (m for m in self.messages.values() if uid in (m.sender_id, m.receiver_id)),
            key=lambda m: m.created_at,
            reverse=True,
        )

    def list_thread(self, user_id: int, partner_id: int):
        pair = {int(user_id), int(partner_id)}
        return sorted(
            (m for m in self.messages.values() if {m.sender_id, m.receiver_id} == pair),
            key=lambda m: m.created_at,
        )

    def mark_read(self, message_ids) -> int:
        ids = [int(m) for m in message_ids]
        self.mark_read_calls.append(ids)
        for mid in ids:
            self.messages[mid] = replace(self.messages[mid], read=True)
        return len(ids)


class InMemoryNotifications:
    def __init__(self, clock: FakeClock):
        self._clock = clock
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.notifications: dict[int, Notification] = {}

    def create(self, *, user_id, title, message, type, related_id=None) -> int:
        with self._lock:
            nid = next(self._ids)
            self.notifications[nid] = Notification(
                notification_id=nid,
                user_id=int(user_id),
                title=title,
                message=message,
                type=type,
                read=False,
                created_at=self._clock(),
                related_id=related_id,
            )
            return nid

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        return self.notifications.get(int(notification_id))

    def list_for_user(self, user_id: int, *, limit: int):
        items = sorted(
            (n for n in self.notifications.values() if n.user_id == int(user_id)),
            key=lambda n: n.created_at,
            reverse=True,
        )
        return items[:limit]

    def count_unread(self, user_id: int) -> int:
        return sum(1 for n in self.notifications.values() if n.user_id == int(user_id) and not n.read)

    def mark_read(self, notification_id: int) -> bool:
        n = self.notifications.get(int(notification_id))
        if not n:
            return False
        self.notifications[n.notification_id] = replace(n, read=True)
        return True

    def mark_all_read(self, user_id: int) -> int:
        count = 0
        for n in list(self.notifications.values()):
            if n.user_id == int(user_id) and not n.read:
                self.notifications[n.notification_id] = replace(n, read=True)
                count += 1
        return count


class RecordingSink:
    """Collects emitted notifications; optionally fails for chosen recipients."""

    def __init__(self, fail_for: Optional[set[int]] = None):
        self.sent: list[dict] = []
        self.fail_for = set(fail_for or ())

    def emit(self, user_id, title, message, type, related_id=None) -> None:
        if int(user_id) in self.fail_for:
            raise RuntimeError("notification store is down")
        self.sent.append(
            {"user_id": int(user_id), "title": title, "message": message, "type": type, "related_id": related_id}
        )

    def titles_for(self, user_id: int) -> list[str]:
        return [n["title"] for n in self.sent if n["user_id"] == int(user_id)]


def add_user(repos, *, name="Student", email=None, role=Role.STUDENT, student_id=None, password="secret123") -> int:
    email = email or f"{name.lower().replace(' ', '.')}.{len(repos.users.users) + 1}@example.edu"
    return repos.users.create_user(
        name=name,
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        department=None,
        student_id=student_id,
    )


@pytest.fixture
def repos():
    clock = FakeClock()
    return SimpleNamespace(
        clock=clock,
        users=InMemoryUsers(clock),
        organizations=InMemoryOrganizations(clock),
        events=InMemoryEvents(clock),
        attendance=InMemoryAttendance(clock),
        clearances=InMemoryClearances(clock),
        points=InMemoryPoints(clock),
        messages=InMemoryMessages(clock),
        notifications=InMemoryNotifications(clock),
    )


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def container(repos, sink):
    return wire_container(
        users_repo=repos.users,
        organizations_repo=repos.organizations,
        events_repo=repos.events,
        attendance_repo=repos.attendance,
        clearances_repo=repos.clearances,
        points_repo=repos.points,
        messages_repo=repos.messages,
        notifications_repo=repos.notifications,
        notifier=sink,
        secret_key="test-secret",
        token_max_age=3600,
    )


@pytest.fixture
def make_user(repos):
    def _make(**kwargs) -> int:
        return add_user(repos, **kwargs)

    return _make


@pytest.fixture
def make_event(repos):
    def _make(*, organization_id: int, title: str = "General Assembly") -> int:
        return repos.events.create(
            EventDraft(
                title=title,
                description="",
                event_date=date(2026, 3, 10),
                start_time=time(8, 0),
                end_time=time(12, 0),
                location="Gym",
                organization_id=organization_id,
            )
        )

    return _make


@pytest.fixture
def make_org(repos):
    def _make(name: str = "Supreme Student Government", type: OrganizationType = OrganizationType.SSG) -> int:
        return repos.organizations.create(name=name, type=type, department=None)

    return _make

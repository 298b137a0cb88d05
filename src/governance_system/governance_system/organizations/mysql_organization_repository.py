from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import OrganizationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Membership, Organization
from .repository import OrganizationRepository


def _row_to_org(r: dict) -> Organization:
    return Organization(
        organization_id=int(r["organization_id"]),
        name=r["name"],
        type=OrganizationType(r["type"]),
        department=r.get("department"),
        created_at=r.get("created_at"),
    )


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, type, department, created_at
                FROM organizations
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            r = fetchone(cur)
            return _row_to_org(r) if r else None

    def list_all(self) -> Sequence[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, type, department, created_at
                FROM organizations
                ORDER BY name ASC
                """
            )
            return [_row_to_org(r) for r in fetchall(cur)]

    def create(self, *, name: str, type: OrganizationType, department: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO organizations(name, type, department) VALUES(%s,%s,%s)",
                (name, type.value, department),
            )
            return int(cur.lastrowid)

    def update(self, organization_id: int, *, name: str, type: OrganizationType, department: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE organizations
                SET name=%s, type=%s, department=%s
                WHERE organization_id=%s
                """,
                (name, type.value, department, int(organization_id)),
            )
            return cur.rowcount > 0

    def get_membership(self, *, organization_id: int, user_id: int) -> Optional[Membership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, user_id, is_admin
                FROM organization_members
                WHERE organization_id=%s AND user_id=%s
                """,
                (int(organization_id), int(user_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Membership(
                organization_id=int(r["organization_id"]),
                user_id=int(r["user_id"]),
                is_admin=bool(r["is_admin"]),
            )

    def list_members(self, organization_id: int) -> Sequence[Membership]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, user_id, is_admin
                FROM organization_members
                WHERE organization_id=%s
                ORDER BY is_admin DESC, joined_at ASC
                """,
                (int(organization_id),),
            )
            return [
                Membership(
                    organization_id=int(r["organization_id"]),
                    user_id=int(r["user_id"]),
                    is_admin=bool(r["is_admin"]),
                )
                for r in fetchall(cur)
            ]

    def list_admin_ids(self, organization_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM organization_members WHERE organization_id=%s AND is_admin=1",
                (int(organization_id),),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]

    def add_member(self, *, organization_id: int, user_id: int, is_admin: bool) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO organization_members(organization_id, user_id, is_admin)
                    VALUES(%s,%s,%s)
                    """,
                    (int(organization_id), int(user_id), 1 if is_admin else 0),
                )
                return True
        except errors.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise

    def remove_member(self, *, organization_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM organization_members WHERE organization_id=%s AND user_id=%s",
                (int(organization_id), int(user_id)),
            )
            return cur.rowcount > 0

    def set_member_admin(self, *, organization_id: int, user_id: int, is_admin: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE organization_members
                SET is_admin=%s
                WHERE organization_id=%s AND user_id=%s
                """,
                (1 if is_admin else 0, int(organization_id), int(user_id)),
            )
            return cur.rowcount > 0

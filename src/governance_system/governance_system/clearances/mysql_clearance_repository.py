from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import ClearanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Clearance
from .repository import ClearanceRepository

_COLUMNS = "clearance_id, user_id, organization_id, status, remarks, transaction_code, created_at, updated_at"


def _row_to_clearance(r: dict) -> Clearance:
    return Clearance(
        clearance_id=int(r["clearance_id"]),
        user_id=int(r["user_id"]),
        organization_id=int(r["organization_id"]),
        status=ClearanceStatus(r["status"]),
        remarks=r.get("remarks"),
        transaction_code=r.get("transaction_code"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLClearanceRepository(ClearanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, clearance_id: int) -> Optional[Clearance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM clearances WHERE clearance_id=%s", (int(clearance_id),))
            r = fetchone(cur)
            return _row_to_clearance(r) if r else None

    def open_request(self, *, user_id: int, organization_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO clearances(user_id, organization_id, status) VALUES(%s,%s,%s)",
                    (int(user_id), int(organization_id), ClearanceStatus.PENDING.value),
                )
                return int(cur.lastrowid)
            except errors.IntegrityError as e:
                if not is_duplicate_key(e):
                    raise

            # Only a rejected row may go back to pending.
            cur.execute(
                """
                UPDATE clearances
                SET status=%s, remarks=NULL, transaction_code=NULL, updated_at=NOW(6)
                WHERE user_id=%s AND organization_id=%s AND status=%s
                """,
                (
                    ClearanceStatus.PENDING.value,
                    int(user_id),
                    int(organization_id),
                    ClearanceStatus.REJECTED.value,
                ),
            )
            if cur.rowcount == 0:
                return None

            cur.execute(
                "SELECT clearance_id FROM clearances WHERE user_id=%s AND organization_id=%s",
                (int(user_id), int(organization_id)),
            )
            r = fetchone(cur)
            return int(r["clearance_id"]) if r else None

    def decide(
        self,
        clearance_id: int,
        *,
        status: ClearanceStatus,
        remarks: Optional[str],
        transaction_code: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE clearances
                SET status=%s, remarks=%s, transaction_code=%s, updated_at=NOW(6)
                WHERE clearance_id=%s AND status=%s
                """,
                (
                    status.value,
                    remarks,
                    transaction_code,
                    int(clearance_id),
                    ClearanceStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_by_user(self, user_id: int) -> Sequence[Clearance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM clearances WHERE user_id=%s ORDER BY created_at DESC, clearance_id DESC",
                (int(user_id),),
            )
            return [_row_to_clearance(r) for r in fetchall(cur)]

    def list_by_organization(self, organization_id: int) -> Sequence[Clearance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clearances
                WHERE organization_id=%s
                ORDER BY created_at DESC, clearance_id DESC
                """,
                (int(organization_id),),
            )
            return [_row_to_clearance(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[Clearance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM clearances WHERE status=%s ORDER BY created_at DESC, clearance_id DESC",
                (ClearanceStatus.PENDING.value,),
            )
            return [_row_to_clearance(r) for r in fetchall(cur)]

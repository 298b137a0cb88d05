from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import Event, EventDraft
from .repository import EventRepository

_COLUMNS = (
    "event_id, title, description, event_date, start_time, end_time, location, "
    "organization_id, mandatory, sanction, created_at"
)


def _row_to_event(r: dict, officer_ids: Sequence[int] = ()) -> Event:
    return Event(
        event_id=int(r["event_id"]),
        title=r["title"],
        description=r.get("description") or "",
        event_date=r["event_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        location=r["location"],
        organization_id=int(r["organization_id"]),
        mandatory=bool(r["mandatory"]),
        sanction=r.get("sanction"),
        officer_ids=tuple(sorted(int(o) for o in officer_ids)),
        created_at=r.get("created_at"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _officers_by_event(self, cur, event_ids: Sequence[int]) -> dict[int, list[int]]:
        if not event_ids:
            return {}
        cur.execute(
            f"SELECT event_id, user_id FROM event_officers WHERE event_id IN ({in_clause(event_ids)})",
            tuple(int(e) for e in event_ids),
        )
        out: dict[int, list[int]] = {}
        for r in fetchall(cur):
            out.setdefault(int(r["event_id"]), []).append(int(r["user_id"]))
        return out

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            if not r:
                return None
            officers = self._officers_by_event(cur, [int(r["event_id"])])
            return _row_to_event(r, officers.get(int(r["event_id"]), []))

    def list_all(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events ORDER BY event_date ASC, start_time ASC")
            rows = fetchall(cur)
            officers = self._officers_by_event(cur, [int(r["event_id"]) for r in rows])
            return [_row_to_event(r, officers.get(int(r["event_id"]), [])) for r in rows]

    def create(self, draft: EventDraft) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(
                    title, description, event_date, start_time, end_time,
                    location, organization_id, mandatory, sanction
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.title,
                    draft.description,
                    draft.event_date,
                    draft.start_time,
                    draft.end_time,
                    draft.location,
                    int(draft.organization_id),
                    1 if draft.mandatory else 0,
                    draft.sanction,
                ),
            )
            return int(cur.lastrowid)

    def update(self, event_id: int, draft: EventDraft) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE events
                SET title=%s, description=%s, event_date=%s, start_time=%s, end_time=%s,
                    location=%s, organization_id=%s, mandatory=%s, sanction=%s
                WHERE event_id=%s
                """,
                (
                    draft.title,
                    draft.description,
                    draft.event_date,
                    draft.start_time,
                    draft.end_time,
                    draft.location,
                    int(draft.organization_id),
                    1 if draft.mandatory else 0,
                    draft.sanction,
                    int(event_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0

    def set_officers(self, event_id: int, officer_ids: Sequence[int]) -> None:
        # Delete and re-insert inside one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM event_officers WHERE event_id=%s", (int(event_id),))
            if officer_ids:
                cur.executemany(
                    "INSERT INTO event_officers(event_id, user_id) VALUES(%s,%s)",
                    [(int(event_id), int(o)) for o in officer_ids],
                )

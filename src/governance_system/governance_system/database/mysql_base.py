from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Sequence

from mysql.connector import errorcode, errors

from ..core.exceptions import TransientError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (errors.OperationalError, errors.InterfaceError)


def _rollback_quietly(conn) -> None:
    try:
        conn.rollback()
    except errors.Error:
        logger.warning("Rollback failed on a broken connection", exc_info=True)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield `(conn, cursor)` inside one transaction.

    Commits on success, rolls back on error. Connectivity and timeout failures
    are re-raised as `TransientError` so callers can decide whether to retry.
    """

    try:
        conn = conn_factory.connect()
    except _TRANSIENT_ERRORS as e:
        raise TransientError("Database is unreachable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except _TRANSIENT_ERRORS as e:
        _rollback_quietly(conn)
        raise TransientError("Database call failed") from e
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        conn.close()


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, errors.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[object]) -> str:
    """Placeholder list for `IN (...)`; callers must pass a non-empty sequence."""
    return ",".join(["%s"] * len(values))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")

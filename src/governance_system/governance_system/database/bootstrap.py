from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)


@contextmanager
def _connect(target: DBConfig, *, with_database: bool = True) -> Iterator:
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connect_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_script(conn, path: str | Path) -> int:
    sql = _strip_line_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    cur = conn.cursor()
    count = 0
    try:
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    finally:
        cur.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _connect(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        cur.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    with _connect(DBConfig.from_dict(db_config)) as conn:
        count = _exec_script(conn, schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    with _connect(DBConfig.from_dict(db_config)) as conn:
        count = _exec_script(conn, seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)


DEMO_ACCOUNTS = (
    # name, email, password, role, student_id, department
    ("SSG Admin", "ssg.admin@example.edu", "admin123", "ssg_admin", None, None),
    ("Club Admin", "club.admin@example.edu", "admin123", "club_admin", None, None),
    ("Event Officer", "officer@example.edu", "officer123", "officer", "2023-CS-002", "Computer Science"),
    ("Demo Student", "student@example.edu", "student123", "student", "2023-CS-001", "Computer Science"),
)


def ensure_demo_accounts(db_config: dict) -> None:
    """Upsert the demo accounts and make the club admin an admin of every seeded organization."""
    with _connect(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor(dictionary=True)
        try:
            for name, email, password, role, student_id, department in DEMO_ACCOUNTS:
                cur.execute(
                    """
                    INSERT INTO users (name, email, password_hash, role, student_id, department, qr_code)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    ON DUPLICATE KEY UPDATE
                        name=VALUES(name), password_hash=VALUES(password_hash), role=VALUES(role),
                        department=VALUES(department)
                    """,
                    (name, email, generate_password_hash(password), role, student_id, department, student_id),
                )

            cur.execute("SELECT user_id FROM users WHERE email=%s", ("club.admin@example.edu",))
            admin = cur.fetchone()
            if not admin:
                raise RuntimeError("Missing demo club admin account")

            cur.execute("SELECT organization_id FROM organizations")
            for org in cur.fetchall():
                cur.execute(
                    """
                    INSERT INTO organization_members (organization_id, user_id, is_admin)
                    VALUES (%s, %s, 1)
                    ON DUPLICATE KEY UPDATE is_admin=1
                    """,
                    (int(org["organization_id"]), int(admin["user_id"])),
                )
        finally:
            cur.close()
    logger.info("Demo accounts ready")


def list_tables(db_config: dict) -> list[str]:
    with _connect(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        rows = [row[0] for row in cur.fetchall()]
        cur.close()
        return rows

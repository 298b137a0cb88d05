from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: a plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    department: Optional[str] = None
    student_id: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, passed explicitly into every operation."""

    user_id: int
    role: Role

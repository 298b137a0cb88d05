from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import OrganizationType


@dataclass(frozen=True)
class Organization:
    organization_id: int
    name: str
    type: OrganizationType
    department: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Membership:
    organization_id: int
    user_id: int
    is_admin: bool = False

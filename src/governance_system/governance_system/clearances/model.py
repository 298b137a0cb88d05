from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ClearanceStatus


@dataclass(frozen=True)
class Clearance:
    """One clearance per (student, organization); a rejected row is reused on re-request."""

    clearance_id: int
    user_id: int
    organization_id: int
    status: ClearanceStatus
    remarks: Optional[str] = None
    transaction_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

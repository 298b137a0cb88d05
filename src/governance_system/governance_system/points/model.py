from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PointEntry:
    entry_id: int
    user_id: int
    points: int
    reason: str
    assigned_by: int
    created_at: Optional[datetime] = None

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Domain entity: an organization event attendance is taken for."""

    event_id: int
    title: str
    description: str
    event_date: date
    start_time: time
    end_time: time
    location: str
    organization_id: int
    mandatory: bool = False
    sanction: Optional[str] = None
    officer_ids: tuple[int, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class EventDraft:
    """Validated input for create/update."""

    title: str
    description: str
    event_date: date
    start_time: time
    end_time: time
    location: str
    organization_id: int
    mandatory: bool = False
    sanction: Optional[str] = None

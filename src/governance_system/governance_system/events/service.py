from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.repository import UserRepository
from ..organizations.repository import OrganizationRepository
from .model import Event, EventDraft
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    def __init__(self, events: EventRepository, organizations: OrganizationRepository, users: UserRepository):
        self._events = events
        self._organizations = organizations
        self._users = users

    def _draft(
        self,
        *,
        title: str,
        description: str,
        event_date: date,
        start_time: time,
        end_time: time,
        location: str,
        organization_id: int,
        mandatory: bool,
        sanction: Optional[str],
    ) -> EventDraft:
        title = require_non_empty(title, "Title")
        location = require_non_empty(location, "Location")
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")
        if not self._organizations.get_by_id(int(organization_id)):
            raise NotFoundError("Organization not found")

        return EventDraft(
            title=title,
            description=(description or "").strip(),
            event_date=event_date,
            start_time=start_time,
            end_time=end_time,
            location=location,
            organization_id=int(organization_id),
            mandatory=bool(mandatory),
            sanction=optional_text(sanction),
        )

    def get_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def list_events(self) -> Sequence[Event]:
        return self._events.list_all()

    def create_event(
        self,
        *,
        title: str,
        description: str,
        event_date: date,
        start_time: time,
        end_time: time,
        location: str,
        organization_id: int,
        mandatory: bool = False,
        sanction: Optional[str] = None,
    ) -> int:
        draft = self._draft(
            title=title,
            description=description,
            event_date=event_date,
            start_time=start_time,
            end_time=end_time,
            location=location,
            organization_id=organization_id,
            mandatory=mandatory,
            sanction=sanction,
        )
        event_id = self._events.create(draft)
        logger.info("Event %s created for organization %s", event_id, draft.organization_id)
        return event_id

    def update_event(
        self,
        *,
        event_id: int,
        title: str,
        description: str,
        event_date: date,
        start_time: time,
        end_time: time,
        location: str,
        organization_id: int,
        mandatory: bool = False,
        sanction: Optional[str] = None,
    ) -> None:
        event = self.get_event(event_id)
        draft = self._draft(
            title=title,
            description=description,
            event_date=event_date,
            start_time=start_time,
            end_time=end_time,
            location=location,
            organization_id=organization_id,
            mandatory=mandatory,
            sanction=sanction,
        )
        self._events.update(event.event_id, draft)

    def delete_event(self, event_id: int) -> None:
        if not self._events.delete(int(event_id)):
            raise NotFoundError("Event not found")
        logger.info("Event %s deleted", event_id)

    def assign_officers(self, *, event_id: int, officer_ids: Sequence[int]) -> None:
        event = self.get_event(event_id)
        unique_ids = sorted({int(o) for o in officer_ids})
        for officer_id in unique_ids:
            if not self._users.get_by_id(officer_id):
                raise NotFoundError(f"User {officer_id} not found")
        self._events.set_officers(event.event_id, unique_ids)

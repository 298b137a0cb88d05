from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Event, EventDraft


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Event]:
        """Ordered by date, then start time."""

        raise NotImplementedError

    def create(self, draft: EventDraft) -> int:
        raise NotImplementedError

    def update(self, event_id: int, draft: EventDraft) -> bool:
        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        raise NotImplementedError

    def set_officers(self, event_id: int, officer_ids: Sequence[int]) -> None:
        """Replace the assigned officer set."""

        raise NotImplementedError

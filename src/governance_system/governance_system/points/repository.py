from __future__ import annotations

from typing import Protocol, Sequence

from .model import PointEntry


class PointsRepository(Protocol):
    """Append-only ledger. There is no update or delete."""

    def add(self, *, user_id: int, points: int, reason: str, assigned_by: int) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[PointEntry]:
        raise NotImplementedError

    def total_for_user(self, user_id: int) -> int:
        """Sum of all entries; 0 when there are none."""

        raise NotImplementedError

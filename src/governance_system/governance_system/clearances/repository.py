from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ClearanceStatus
from .model import Clearance


class ClearanceRepository(Protocol):
    def get_by_id(self, clearance_id: int) -> Optional[Clearance]:
        raise NotImplementedError

    def open_request(self, *, user_id: int, organization_id: int) -> Optional[int]:
        """Create a pending clearance, or recycle a rejected one back to pending.

        Runs as one transaction. Returns the clearance_id, or None when the
        pair is already pending or approved.
        """

        raise NotImplementedError

    def decide(
        self,
        clearance_id: int,
        *,
        status: ClearanceStatus,
        remarks: Optional[str],
        transaction_code: Optional[str],
    ) -> bool:
        """Move a pending clearance to `status`. False if it was not pending."""

        raise NotImplementedError

    def list_by_user(self, user_id: int) -> Sequence[Clearance]:
        raise NotImplementedError

    def list_by_organization(self, organization_id: int) -> Sequence[Clearance]:
        raise NotImplementedError

    def list_pending(self) -> Sequence[Clearance]:
        raise NotImplementedError

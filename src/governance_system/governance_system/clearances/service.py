from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..common.validators import optional_text
from ..core.constants import TRANSACTION_CODE_LENGTH
from ..core.enums import ClearanceStatus, NotificationType
from ..core.exceptions import (
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..notifications.sink import NotificationSink, emit_best_effort
from ..organizations.service import Directory
from .model import Clearance
from .repository import ClearanceRepository

logger = logging.getLogger(__name__)

_DECISIONS = (ClearanceStatus.APPROVED, ClearanceStatus.REJECTED)


def new_transaction_code() -> str:
    return uuid.uuid4().hex[:TRANSACTION_CODE_LENGTH].upper()


class ClearanceService:
    """Per (student, organization) clearance workflow.

    none -> pending -> approved | rejected, and rejected -> pending on a new
    request. Approved is terminal.
    """

    def __init__(self, clearances: ClearanceRepository, directory: Directory, notifier: NotificationSink):
        self._clearances = clearances
        self._directory = directory
        self._notifier = notifier

    def get_clearance(self, clearance_id: int) -> Clearance:
        clearance = self._clearances.get_by_id(int(clearance_id))
        if not clearance:
            raise NotFoundError("Clearance not found")
        return clearance

    def request_clearance(self, *, user_id: int, organization_id: int) -> Clearance:
        # Raises NotFoundError for an unknown organization.
        self._directory.get_organization_name(int(organization_id))

        clearance_id = self._clearances.open_request(user_id=int(user_id), organization_id=int(organization_id))
        if clearance_id is None:
            raise DuplicateRequestError("A clearance request is already pending or approved for this organization")
        logger.info("Clearance %s requested by user %s for organization %s", clearance_id, user_id, organization_id)

        self._notify_admins(user_id=int(user_id), organization_id=int(organization_id))
        return self.get_clearance(clearance_id)

    def _notify_admins(self, *, user_id: int, organization_id: int) -> None:
        try:
            admin_ids = list(self._directory.list_admins(organization_id))
        except Exception:
            logger.exception("Degraded: could not list admins of organization %s", organization_id)
            return

        for admin_id in admin_ids:
            emit_best_effort(
                self._notifier,
                admin_id,
                "New Clearance Request",
                "A student has requested clearance approval.",
                NotificationType.CLEARANCE,
                user_id,
            )

    def update_clearance_status(
        self,
        *,
        clearance_id: int,
        status: ClearanceStatus,
        remarks: Optional[str] = None,
    ) -> Clearance:
        clearance = self.get_clearance(clearance_id)

        try:
            status = ClearanceStatus(status)
        except ValueError:
            raise ValidationError("Status must be approved or rejected")
        if status not in _DECISIONS:
            raise ValidationError("Status must be approved or rejected")

        if clearance.status != ClearanceStatus.PENDING:
            raise InvalidTransitionError(f"Clearance is already {clearance.status.value}")

        code = new_transaction_code() if status == ClearanceStatus.APPROVED else None
        if not self._clearances.decide(
            clearance.clearance_id,
            status=status,
            remarks=optional_text(remarks),
            transaction_code=code,
        ):
            # Another decision landed first.
            raise InvalidTransitionError("Clearance is no longer pending")
        logger.info("Clearance %s %s", clearance.clearance_id, status.value)

        self._notify_student(clearance, status)
        return self.get_clearance(clearance.clearance_id)

    def _notify_student(self, clearance: Clearance, status: ClearanceStatus) -> None:
        try:
            org_name = self._directory.get_organization_name(clearance.organization_id)
        except Exception:
            logger.warning(
                "Degraded: organization %s lookup failed; clearance %s decided without notification",
                clearance.organization_id,
                clearance.clearance_id,
                exc_info=True,
            )
            return

        emit_best_effort(
            self._notifier,
            clearance.user_id,
            f"Clearance {status.value.capitalize()}",
            f"Your clearance for {org_name} has been {status.value}.",
            NotificationType.CLEARANCE,
            clearance.organization_id,
        )

    def list_by_user(self, user_id: int) -> Sequence[Clearance]:
        return self._clearances.list_by_user(int(user_id))

    def list_by_organization(self, organization_id: int) -> Sequence[Clearance]:
        return self._clearances.list_by_organization(int(organization_id))

    def list_pending(self) -> Sequence[Clearance]:
        return self._clearances.list_pending()

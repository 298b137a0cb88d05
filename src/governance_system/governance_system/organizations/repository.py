from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import OrganizationType
from .model import Membership, Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Organization]:
        """Ordered by name."""

        raise NotImplementedError

    def create(self, *, name: str, type: OrganizationType, department: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, organization_id: int, *, name: str, type: OrganizationType, department: Optional[str]) -> bool:
        raise NotImplementedError

    # Memberships
    def get_membership(self, *, organization_id: int, user_id: int) -> Optional[Membership]:
        raise NotImplementedError

    def list_members(self, organization_id: int) -> Sequence[Membership]:
        raise NotImplementedError

    def list_admin_ids(self, organization_id: int) -> Sequence[int]:
        raise NotImplementedError

    def add_member(self, *, organization_id: int, user_id: int, is_admin: bool) -> bool:
        """Insert the membership; False when it already exists."""

        raise NotImplementedError

    def remove_member(self, *, organization_id: int, user_id: int) -> bool:
        raise NotImplementedError

    def set_member_admin(self, *, organization_id: int, user_id: int, is_admin: bool) -> bool:
        raise NotImplementedError

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.enums import OrganizationType
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.repository import UserRepository
from .model import Membership, Organization
from .repository import OrganizationRepository


class Directory(Protocol):
    """Membership lookups the clearance workflow depends on."""

    def list_admins(self, organization_id: int) -> Sequence[int]:
        raise NotImplementedError

    def get_organization_name(self, organization_id: int) -> str:
        """Raises NotFoundError for an unknown organization."""

        raise NotImplementedError


class OrganizationDirectory(Directory):
    def __init__(self, organizations: OrganizationRepository):
        self._organizations = organizations

    def list_admins(self, organization_id: int) -> Sequence[int]:
        return list(self._organizations.list_admin_ids(int(organization_id)))

    def get_organization_name(self, organization_id: int) -> str:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organization not found")
        return org.name


class OrganizationService:
    def __init__(self, organizations: OrganizationRepository, users: UserRepository):
        self._organizations = organizations
        self._users = users

    def get_organization(self, organization_id: int) -> Organization:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def list_organizations(self) -> Sequence[Organization]:
        return self._organizations.list_all()

    def create_organization(self, *, name: str, type: OrganizationType, department: Optional[str] = None) -> int:
        name = require_non_empty(name, "Organization name")
        return self._organizations.create(name=name, type=OrganizationType(type), department=optional_text(department))

    def update_organization(
        self,
        *,
        organization_id: int,
        name: Optional[str] = None,
        type: Optional[OrganizationType] = None,
        department: Optional[str] = None,
    ) -> None:
        org = self.get_organization(organization_id)
        self._organizations.update(
            org.organization_id,
            name=require_non_empty(name, "Organization name") if name is not None else org.name,
            type=OrganizationType(type) if type is not None else org.type,
            department=optional_text(department) if department is not None else org.department,
        )

    def list_members(self, organization_id: int) -> Sequence[Membership]:
        org = self.get_organization(organization_id)
        return self._organizations.list_members(org.organization_id)

    def add_member(self, *, organization_id: int, user_id: int, is_admin: bool = False) -> None:
        org = self.get_organization(organization_id)
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")
        if not self._organizations.add_member(organization_id=org.organization_id, user_id=int(user_id), is_admin=bool(is_admin)):
            raise ValidationError("User is already a member of this organization")

    def remove_member(self, *, organization_id: int, user_id: int) -> None:
        if not self._organizations.remove_member(organization_id=int(organization_id), user_id=int(user_id)):
            raise NotFoundError("Membership not found")

    def set_member_admin(self, *, organization_id: int, user_id: int, is_admin: bool) -> None:
        if not self._organizations.get_membership(organization_id=int(organization_id), user_id=int(user_id)):
            raise NotFoundError("Membership not found")
        self._organizations.set_member_admin(
            organization_id=int(organization_id),
            user_id=int(user_id),
            is_admin=bool(is_admin),
        )

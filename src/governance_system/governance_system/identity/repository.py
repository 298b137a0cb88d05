from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_student_id(self, student_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: Optional[str],
        student_id: Optional[str],
    ) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """Newest first."""

        raise NotImplementedError

    def update_role(self, user_id: int, *, role: Role) -> bool:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: int,
        *,
        name: str,
        department: Optional[str],
        student_id: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_qr_code(self, user_id: int, *, qr_code: str) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

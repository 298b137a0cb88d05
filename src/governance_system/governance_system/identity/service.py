from __future__ import annotations

import logging
from typing import Optional, Sequence

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Principal, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityGateway:
    """Resolves an opaque bearer token to a `Principal`.

    Tokens only carry the user id; the role is read from the user store on
    every call so an admin's role change applies to live tokens.
    """

    _SALT = "governance-auth"

    def __init__(self, users: UserRepository, *, secret_key: str, max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._users = users
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self._SALT)
        self._max_age = int(max_age)

    def issue_token(self, principal: Principal) -> str:
        return self._serializer.dumps({"uid": int(principal.user_id)})

    def authenticate(self, credential: str) -> Principal:
        if not credential:
            raise AuthenticationError("Missing credentials")
        try:
            payload = self._serializer.loads(credential, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Session expired, please sign in again")
        except BadSignature:
            raise AuthenticationError("Invalid credentials")

        user_id = payload.get("uid") if isinstance(payload, dict) else None
        user = self._users.get_by_id(int(user_id)) if user_id is not None else None
        if not user:
            raise AuthenticationError("Invalid credentials")
        return Principal(user_id=user.user_id, role=user.role)


class AuthService:
    """Use cases: sign in with email and password, change password."""

    def __init__(self, users: UserRepository, gateway: IdentityGateway):
        self._users = users
        self._gateway = gateway

    def login(self, email: str, password: str) -> tuple[Principal, str]:
        if not email or not password:
            raise AuthenticationError("Email and password are required")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        principal = Principal(user_id=user.user_id, role=user.role)
        logger.info("User %s signed in", user.user_id)
        return principal, self._gateway.issue_token(principal)

    def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        try:
            ok = bool(current_password) and check_password_hash(user.password_hash, current_password)
        except ValueError:
            ok = False
        if not ok:
            raise ValidationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("User %s changed their password", user.user_id)


class UserService:
    """Use case: registration and account management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        student_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        student_id = optional_text(student_id)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")
        if student_id and self._users.get_by_student_id(student_id):
            raise ValidationError("Student ID is already registered")

        return self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.STUDENT,
            department=optional_text(department),
            student_id=student_id,
        )

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def change_role(self, *, user_id: int, role: Role) -> None:
        user = self.get_user(user_id)
        self._users.update_role(user.user_id, role=Role(role))
        logger.info("Role of user %s changed from %s to %s", user.user_id, user.role.value, Role(role).value)

    def update_profile(
        self,
        *,
        user_id: int,
        name: str,
        department: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> None:
        user = self.get_user(user_id)
        name = require_non_empty(name, "Name")
        student_id = optional_text(student_id)
        if student_id and student_id != user.student_id:
            other = self._users.get_by_student_id(student_id)
            if other and other.user_id != user.user_id:
                raise ValidationError("Student ID is already registered")

        self._users.update_profile(
            user.user_id,
            name=name,
            department=optional_text(department),
            student_id=student_id,
        )

    def assign_qr_code(self, *, user_id: int) -> str:
        """Point the user's QR reference at their student ID (the scanned payload)."""
        user = self.get_user(user_id)
        if not user.student_id:
            raise ValidationError("A student ID is required before a QR code can be issued")
        self._users.set_qr_code(user.user_id, qr_code=user.student_id)
        return user.student_id

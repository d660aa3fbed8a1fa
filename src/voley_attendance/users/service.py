from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_bool, require_email, require_min_length, require_non_empty, require_role
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _password_matches(password_hash: str, password: Optional[str]) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # e.g. placeholder or corrupted hashes
        return False


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        if not _password_matches(user.password_hash, password):
            raise AuthenticationError("Invalid credentials")

        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)


class UserService:
    """Use case: manage accounts (admin) and own password."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin role required")

    def list_users(self, *, current_role: Role) -> Sequence[User]:
        self._require_admin(current_role)
        return self._users.list_all()

    def create_user(self, *, current_role: Role, email: str, password: str, name: str, role: str | Role) -> User:
        self._require_admin(current_role)
        email = require_email(email)
        require_min_length(password, "password")
        name = require_non_empty(name, "name")
        role = require_role(role)

        if self._users.get_by_email(email):
            raise ValidationError("email is already registered")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
        )
        logger.info("User %s created with role %s", user_id, role.value)
        return self._users.get_by_id(user_id)

    def update_user(
        self,
        *,
        current_role: Role,
        user_id: int,
        email: Optional[str] = None,
        password: Optional[str] = None,
        name: Optional[str] = None,
        role: Optional[str | Role] = None,
        is_active: Optional[bool] = None,
    ) -> User:
        self._require_admin(current_role)
        email = require_email(email) if email is not None else None
        if name is not None:
            name = require_non_empty(name, "name")
        role = require_role(role) if role is not None else None
        is_active = require_bool(is_active, "active") if is_active is not None else None
        password_hash = None
        if optional_text(password):
            password_hash = generate_password_hash(require_min_length(password, "password"))

        existing = self._users.get_by_id(user_id)
        if not existing:
            raise NotFoundError("User not found")
        if email and email != existing.email and self._users.get_by_email(email):
            raise ValidationError("email is already registered")

        self._users.update_user(
            user_id,
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            is_active=is_active,
        )
        return self._users.get_by_id(user_id)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        """Self-service password change; the current password must match."""
        if not current_password:
            raise ValidationError("current password is required")
        require_min_length(new_password, "new password")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not _password_matches(user.password_hash, current_password):
            raise ValidationError("current password is incorrect")

        self._users.update_user(user_id, password_hash=generate_password_hash(new_password))
        logger.info("User %s changed its password", user_id)

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        self._require_admin(current_role)
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot delete your own account")

        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        if not self._users.delete_with_owned_data(user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted with its data partition", user_id)

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository port for User.

    Services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, email: str, password_hash: str, name: str, role: Role) -> int:
        raise NotImplementedError

    def update_user(
        self,
        user_id: int,
        *,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_with_owned_data(self, user_id: int) -> bool:
        """Delete the user and every row of its data partition."""

        raise NotImplementedError

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Category
from .model import Player


class PlayerRepository(Protocol):
    """Every method is scoped by ``owner_id``; rows of other tenants are invisible."""

    def get_owned(self, player_id: int, owner_id: int) -> Optional[Player]:
        raise NotImplementedError

    def list_owned(
        self,
        owner_id: int,
        *,
        active: Optional[bool] = None,
        category: Optional[Category] = None,
    ) -> Sequence[Player]:
        raise NotImplementedError

    def count_active(self, owner_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        owner_id: int,
        name: str,
        last_name: str,
        category: Category,
        phone: Optional[str] = None,
        position: Optional[str] = None,
        birth_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, player_id: int, owner_id: int, **fields) -> bool:
        """Partial update; ``None`` values keep the stored column."""

        raise NotImplementedError

    def set_active(self, player_id: int, owner_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_with_attendance(self, player_id: int, owner_id: int) -> bool:
        raise NotImplementedError

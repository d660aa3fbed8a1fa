from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account, and the tenant owning a roster and schedule.

    Plain data object (no DB access code).
    """

    user_id: int
    email: str
    password_hash: str
    name: str
    role: Role
    is_active: bool = True
    created_at: Optional[datetime] = None

    def public_view(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "active": self.is_active,
            "created_at": self.created_at,
        }

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..core.enums import Category


@dataclass(frozen=True)
class Player:
    """Domain entity: a club player owned by one tenant."""

    player_id: int
    name: str
    last_name: str
    category: Category
    owner_id: int
    phone: Optional[str] = None
    position: Optional[str] = None
    birth_date: Optional[date] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("player_id")
        data["active"] = data.pop("is_active")
        data["category"] = self.category.value
        data["birth_date"] = self.birth_date.isoformat() if self.birth_date else None
        return data

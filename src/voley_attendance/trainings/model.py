from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DAYS_OF_WEEK


@dataclass(frozen=True)
class TrainingTemplate:
    """Recurring weekly training slot (not a concrete date)."""

    training_id: int
    day_of_week: int
    start_time: str
    end_time: str
    owner_id: int
    name: Optional[str] = None
    is_active: bool = True

    @property
    def day_name(self) -> str:
        return DAYS_OF_WEEK[self.day_of_week]

    def to_dict(self) -> dict:
        return {
            "id": self.training_id,
            "day_of_week": self.day_of_week,
            "day_name": self.day_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "name": self.name,
            "active": self.is_active,
            "owner_id": self.owner_id,
        }

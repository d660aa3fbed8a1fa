from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class TrainingSession:
    """One concrete, dated occurrence of training.

    ``training_name``/``start_time``/``end_time`` are joined from the template
    when the session was created from one.
    """

    session_id: int
    date: date
    owner_id: int
    training_id: Optional[int] = None
    notes: Optional[str] = None
    training_name: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "date": self.date.isoformat(),
            "training_id": self.training_id,
            "notes": self.notes,
            "training_name": self.training_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "owner_id": self.owner_id,
        }

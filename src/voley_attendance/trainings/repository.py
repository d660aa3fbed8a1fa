from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TrainingTemplate


class TrainingRepository(Protocol):
    def get_owned(self, training_id: int, owner_id: int) -> Optional[TrainingTemplate]:
        raise NotImplementedError

    def list_owned(self, owner_id: int, *, active: Optional[bool] = None) -> Sequence[TrainingTemplate]:
        raise NotImplementedError

    def create(self, *, owner_id: int, day_of_week: int, start_time: str, end_time: str, name: str) -> int:
        raise NotImplementedError

    def update(
        self,
        training_id: int,
        owner_id: int,
        *,
        day_of_week: Optional[int] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_detaching_sessions(self, training_id: int, owner_id: int) -> bool:
        """Unlink sessions created from the template, then delete it."""

        raise NotImplementedError

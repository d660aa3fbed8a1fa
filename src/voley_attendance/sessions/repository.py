from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Tuple

from .model import TrainingSession


class SessionRepository(Protocol):
    def get_owned(self, session_id: int, owner_id: int) -> Optional[TrainingSession]:
        raise NotImplementedError

    def get_or_create(
        self,
        *,
        owner_id: int,
        session_date: date,
        training_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Tuple[TrainingSession, bool]:
        """Return the session for (owner, date[, training]) creating it if missing.

        The lookup and the insert share one write transaction. The flag tells
        whether a row was created.
        """

        raise NotImplementedError

    def list_owned(
        self,
        owner_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        training_id: Optional[int] = None,
    ) -> Sequence[TrainingSession]:
        raise NotImplementedError

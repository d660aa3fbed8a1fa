from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..attendance.model import ConfirmationRecord, SessionAttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import optional_iso_date, require_iso_date
from ..common.validators import optional_positive_id, optional_text
from ..players.model import Player
from ..tenancy.ownership import OwnershipGuard
from .model import TrainingSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionDetail:
    session: TrainingSession
    attendance: Sequence[SessionAttendanceRow]
    pending_players: Sequence[Player]
    confirmations: Sequence[ConfirmationRecord]

    def to_dict(self) -> dict:
        return {
            "session": self.session.to_dict(),
            "attendance": [r.to_dict() for r in self.attendance],
            "pending_players": [p.to_dict() for p in self.pending_players],
            "confirmations": [c.to_dict() for c in self.confirmations],
        }


class SessionService:
    """Use case: resolve dated sessions and read a session sheet."""

    def __init__(self, sessions: SessionRepository, attendance: AttendanceRepository, guard: OwnershipGuard):
        self._sessions = sessions
        self._attendance = attendance
        self._guard = guard

    def resolve_session(
        self,
        tenant_id: int,
        session_date: Any,
        training_id: Any = None,
        notes: Optional[str] = None,
    ) -> TrainingSession:
        """Get-or-create the session for (tenant, date[, template]).

        Without a template id any session of that date matches. Repeated calls
        return the same row.
        """
        day = require_iso_date(session_date, "date")
        training_id = optional_positive_id(training_id, "training_id")
        if training_id is not None:
            self._guard.training(training_id, tenant_id)

        session, created = self._sessions.get_or_create(
            owner_id=int(tenant_id),
            session_date=day,
            training_id=training_id,
            notes=optional_text(notes),
        )
        if created:
            logger.info("Session %s created for tenant %s on %s", session.session_id, tenant_id, day)
        return session

    def list_sessions(
        self,
        tenant_id: int,
        *,
        date_from: Any = None,
        date_to: Any = None,
        training_id: Any = None,
    ) -> Sequence[TrainingSession]:
        return self._sessions.list_owned(
            int(tenant_id),
            date_from=optional_iso_date(date_from, "from"),
            date_to=optional_iso_date(date_to, "to"),
            training_id=optional_positive_id(training_id, "training_id"),
        )

    def get_session_detail(self, session_id: int, tenant_id: int) -> SessionDetail:
        session = self._guard.session(session_id, tenant_id)
        return SessionDetail(
            session=session,
            attendance=self._attendance.list_for_session(session.session_id),
            pending_players=self._attendance.list_pending_players(session.session_id, int(tenant_id)),
            confirmations=self._attendance.list_confirmations(session.session_id),
        )

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Category, ConfirmationStatus
from ..players.model import Player
from .model import (
    AttendanceRecord,
    AttendanceReportRow,
    BulkItem,
    BulkResult,
    CategoryAttendanceRow,
    ConfirmationRecord,
    SessionAttendanceRow,
    SessionTally,
)


class AttendanceRepository(Protocol):
    """Attendance and confirmation rows.

    Tenant scope is inherited through the session and the player; callers
    validate both before a write.
    """

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_session_and_player(self, session_id: int, player_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, *, session_id: int, player_id: int, attended: bool, absence_reason: Optional[str]) -> AttendanceRecord:
        """Insert, or overwrite attended/absence_reason/updated_at on conflict."""

        raise NotImplementedError

    def upsert_bulk(
        self,
        *,
        session_id: int,
        owner_id: int,
        items: Sequence[BulkItem],
        skip_foreign_players: bool = True,
    ) -> BulkResult:
        """Apply every item in ONE transaction.

        Items whose player is not owned by ``owner_id`` are skipped, or abort the
        batch with NotFoundError when ``skip_foreign_players`` is off.
        """

        raise NotImplementedError

    def update_record(self, record_id: int, *, attended: Optional[bool], absence_reason: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_record(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_for_session(self, session_id: int) -> Sequence[SessionAttendanceRow]:
        raise NotImplementedError

    def list_pending_players(self, session_id: int, owner_id: int) -> Sequence[Player]:
        """Active players of the owner without an attendance row for the session."""

        raise NotImplementedError

    def get_confirmation_by_id(self, record_id: int) -> Optional[ConfirmationRecord]:
        raise NotImplementedError

    def upsert_confirmation(
        self,
        *,
        session_id: int,
        player_id: int,
        status: ConfirmationStatus,
        notes: Optional[str],
    ) -> ConfirmationRecord:
        raise NotImplementedError

    def list_confirmations(self, session_id: int) -> Sequence[ConfirmationRecord]:
        raise NotImplementedError

    def session_tallies(self, owner_id: int, *, since: date) -> Sequence[SessionTally]:
        """Present/total per owned session dated on or after ``since``."""

        raise NotImplementedError

    def category_rows(self, owner_id: int, *, since: date) -> Sequence[CategoryAttendanceRow]:
        raise NotImplementedError

    def get_report_rows(
        self,
        owner_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[Category] = None,
        player_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

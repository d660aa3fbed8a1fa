from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import optional_iso_date
from ..common.validators import optional_text, require_bool, require_confirmation_status, require_positive_id
from ..core.constants import NO_REASON_PLACEHOLDER
from ..core.exceptions import ValidationError
from ..core.enums import EntityKind
from ..tenancy.ownership import OwnershipGuard
from .model import AttendanceRecord, BulkItem, BulkResult, ConfirmationRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerStats:
    player_id: int
    total_sessions: int
    attended: int
    missed: int
    attendance_rate: str
    absences: list[dict]

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "total_sessions": self.total_sessions,
            "attended": self.attended,
            "missed": self.missed,
            "attendance_rate": self.attendance_rate,
            "absences": list(self.absences),
        }


def normalize_reason(attended: bool, reason: Optional[str]) -> Optional[str]:
    """Attendance and absence reason are mutually exclusive."""
    if attended:
        return None
    return optional_text(reason)


class AttendanceService:
    """Use case: record who attended, and who confirmed, each session."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        guard: OwnershipGuard,
        *,
        skip_foreign_players: bool = True,
    ):
        self._attendance = attendance
        self._guard = guard
        self._skip_foreign_players = bool(skip_foreign_players)

    def record_attendance(
        self,
        tenant_id: int,
        session_id: Any,
        player_id: Any,
        attended: Any,
        reason: Optional[str] = None,
    ) -> AttendanceRecord:
        session_id = require_positive_id(session_id, "session_id")
        player_id = require_positive_id(player_id, "player_id")
        attended = require_bool(attended, "attended")

        self._guard.session(session_id, tenant_id)
        self._guard.player(player_id, tenant_id)

        return self._attendance.upsert(
            session_id=session_id,
            player_id=player_id,
            attended=attended,
            absence_reason=normalize_reason(attended, reason),
        )

    def record_attendance_bulk(
        self,
        tenant_id: int,
        session_id: Any,
        items: Iterable[Union[BulkItem, Mapping[str, Any]]],
    ) -> BulkResult:
        """Upsert many rows for one session atomically.

        Players outside the tenant are skipped (and reported) or, with
        ``skip_foreign_players`` off, abort the whole batch.
        """
        session_id = require_positive_id(session_id, "session_id")
        if items is None or isinstance(items, (str, bytes, Mapping)):
            raise ValidationError("attendance must be a list")
        batch = [self._to_bulk_item(item) for item in items]

        self._guard.session(session_id, tenant_id)

        result = self._attendance.upsert_bulk(
            session_id=session_id,
            owner_id=int(tenant_id),
            items=batch,
            skip_foreign_players=self._skip_foreign_players,
        )
        logger.info("Bulk attendance for session %s: %s of %s applied", session_id, result.count, len(batch))
        return result

    @staticmethod
    def _to_bulk_item(item: Union[BulkItem, Mapping[str, Any]]) -> BulkItem:
        if isinstance(item, BulkItem):
            player_id, attended, reason = item.player_id, item.attended, item.absence_reason
        elif isinstance(item, Mapping):
            player_id, attended, reason = item.get("player_id"), item.get("attended"), item.get("absence_reason")
        else:
            raise ValidationError("attendance item is not valid")

        attended = require_bool(attended, "attended")
        return BulkItem(
            player_id=require_positive_id(player_id, "player_id"),
            attended=attended,
            absence_reason=normalize_reason(attended, reason),
        )

    def update_record(
        self,
        tenant_id: int,
        record_id: Any,
        *,
        attended: Any = None,
        reason: Optional[str] = None,
    ) -> AttendanceRecord:
        record_id = require_positive_id(record_id, "record_id")
        if attended is not None:
            attended = require_bool(attended, "attended")

        record = self._guard.find_owned(EntityKind.ATTENDANCE, record_id, tenant_id)
        effective = record.attended if attended is None else attended
        self._attendance.update_record(
            record_id,
            attended=attended,
            absence_reason=normalize_reason(effective, reason),
        )
        return self._attendance.get_by_id(record_id)

    def delete_record(self, tenant_id: int, record_id: Any) -> None:
        record_id = require_positive_id(record_id, "record_id")
        self._guard.find_owned(EntityKind.ATTENDANCE, record_id, tenant_id)
        self._attendance.delete_record(record_id)

    def set_confirmation(
        self,
        tenant_id: int,
        session_id: Any,
        player_id: Any,
        status: Any,
        notes: Optional[str] = None,
    ) -> ConfirmationRecord:
        session_id = require_positive_id(session_id, "session_id")
        player_id = require_positive_id(player_id, "player_id")
        status = require_confirmation_status(status)

        self._guard.session(session_id, tenant_id)
        self._guard.player(player_id, tenant_id)

        return self._attendance.upsert_confirmation(
            session_id=session_id,
            player_id=player_id,
            status=status,
            notes=optional_text(notes),
        )

    def list_confirmations(self, tenant_id: int, session_id: Any) -> Sequence[ConfirmationRecord]:
        session = self._guard.session(require_positive_id(session_id, "session_id"), tenant_id)
        return self._attendance.list_confirmations(session.session_id)

    def get_player_stats(
        self,
        tenant_id: int,
        player_id: Any,
        *,
        date_from: Any = None,
        date_to: Any = None,
    ) -> PlayerStats:
        player_id = require_positive_id(player_id, "player_id")
        start: Optional[date] = optional_iso_date(date_from, "from")
        end: Optional[date] = optional_iso_date(date_to, "to")

        self._guard.player(player_id, tenant_id)
        rows = self._attendance.get_report_rows(int(tenant_id), date_from=start, date_to=end, player_id=player_id)

        total = len(rows)
        attended = sum(1 for r in rows if r.attended)
        absences = [
            {"date": r.session_date.isoformat(), "reason": r.absence_reason or NO_REASON_PLACEHOLDER}
            for r in sorted(rows, key=lambda r: r.session_date, reverse=True)
            if not r.attended
        ]
        return PlayerStats(
            player_id=player_id,
            total_sessions=total,
            attended=attended,
            missed=total - attended,
            attendance_rate=f"{attended * 100 / total:.1f}" if total else "0.0",
            absences=absences,
        )

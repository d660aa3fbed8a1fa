from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import Category, ConfirmationStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: whether a player attended one session."""

    record_id: int
    session_id: int
    player_id: int
    attended: bool
    absence_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionAttendanceRow:
    """Attendance row joined with the player, as shown on a session sheet."""

    record_id: int
    player_id: int
    name: str
    last_name: str
    category: Category
    position: Optional[str]
    attended: bool
    absence_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "player_id": self.player_id,
            "name": self.name,
            "last_name": self.last_name,
            "category": self.category.value,
            "position": self.position,
            "attended": self.attended,
            "absence_reason": self.absence_reason,
        }


@dataclass(frozen=True)
class ConfirmationRecord:
    """Pre-session RSVP, independent from the attendance fact."""

    record_id: int
    session_id: int
    player_id: int
    status: ConfirmationStatus
    notes: Optional[str] = None
    name: Optional[str] = None
    last_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "session_id": self.session_id,
            "player_id": self.player_id,
            "status": self.status.value,
            "notes": self.notes,
            "name": self.name,
            "last_name": self.last_name,
        }


@dataclass(frozen=True)
class BulkItem:
    player_id: int
    attended: bool
    absence_reason: Optional[str] = None


@dataclass(frozen=True)
class BulkResult:
    count: int
    skipped_player_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"count": self.count, "skipped_player_ids": list(self.skipped_player_ids)}


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports and exports (one attendance row, flattened)."""

    player_id: int
    name: str
    last_name: str
    category: Category
    position: Optional[str]
    session_date: date
    training_name: Optional[str]
    attended: bool
    absence_reason: Optional[str] = None


@dataclass(frozen=True)
class SessionTally:
    """Per-session present/total counts feeding the rolling average."""

    session_id: int
    session_date: date
    present: int
    total: int


@dataclass(frozen=True)
class CategoryAttendanceRow:
    """One attendance row reduced to what the category trend needs."""

    category: Category
    session_date: date
    attended: bool

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import to_date
from ..core.enums import Category, ConfirmationStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import as_db_bool, fetchall, fetchone
from ..players.model import Player
from ..players.sqlite_player_repository import row_to_player
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
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO attendance (session_id, player_id, attended, absence_reason)
    VALUES (?, ?, ?, ?)
    ON CONFLICT(session_id, player_id) DO UPDATE SET
        attended = excluded.attended,
        absence_reason = excluded.absence_reason,
        updated_at = CURRENT_TIMESTAMP
"""

_RECORD_COLUMNS = "id, session_id, player_id, attended, absence_reason, created_at, updated_at"


def _ts(value: Any) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _to_record(row: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(row["id"]),
        session_id=int(row["session_id"]),
        player_id=int(row["player_id"]),
        attended=bool(row["attended"]),
        absence_reason=row.get("absence_reason"),
        created_at=_ts(row.get("created_at")),
        updated_at=_ts(row.get("updated_at")),
    )


def _to_confirmation(row: Dict[str, Any]) -> ConfirmationRecord:
    return ConfirmationRecord(
        record_id=int(row["id"]),
        session_id=int(row["session_id"]),
        player_id=int(row["player_id"]),
        status=ConfirmationStatus(row["status"]),
        notes=row.get("notes"),
        name=row.get("name"),
        last_name=row.get("last_name"),
    )


class SQLiteAttendanceRepository(AttendanceRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with self._db.transaction(write=False) as cur:
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE id = ?", (int(record_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_for_session_and_player(self, session_id: int, player_id: int) -> Optional[AttendanceRecord]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE session_id = ? AND player_id = ?",
                (int(session_id), int(player_id)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def upsert(self, *, session_id: int, player_id: int, attended: bool, absence_reason: Optional[str]) -> AttendanceRecord:
        with self._db.transaction() as cur:
            cur.execute(_UPSERT_SQL, (int(session_id), int(player_id), as_db_bool(attended), absence_reason))
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE session_id = ? AND player_id = ?",
                (int(session_id), int(player_id)),
            )
            return _to_record(fetchone(cur))

    def upsert_bulk(
        self,
        *,
        session_id: int,
        owner_id: int,
        items: Sequence[BulkItem],
        skip_foreign_players: bool = True,
    ) -> BulkResult:
        applied = 0
        skipped: list[int] = []

        with self._db.transaction() as cur:
            for item in items:
                cur.execute("SELECT 1 FROM players WHERE id = ? AND owner_id = ?", (int(item.player_id), int(owner_id)))
                if not cur.fetchone():
                    if not skip_foreign_players:
                        raise NotFoundError("Player not found")
                    skipped.append(int(item.player_id))
                    continue
                cur.execute(
                    _UPSERT_SQL,
                    (int(session_id), int(item.player_id), as_db_bool(item.attended), item.absence_reason),
                )
                applied += 1

        if skipped:
            logger.warning("Bulk attendance for session %s skipped players %s", session_id, skipped)
        return BulkResult(count=applied, skipped_player_ids=skipped)

    def update_record(self, record_id: int, *, attended: Optional[bool], absence_reason: Optional[str]) -> bool:
        with self._db.transaction() as cur:
            cur.execute(
                """
                UPDATE attendance SET
                    attended = COALESCE(?, attended),
                    absence_reason = ?,
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (as_db_bool(attended), absence_reason, int(record_id)),
            )
            return cur.rowcount > 0

    def delete_record(self, record_id: int) -> bool:
        with self._db.transaction() as cur:
            cur.execute("DELETE FROM attendance WHERE id = ?", (int(record_id),))
            return cur.rowcount > 0

    def list_for_session(self, session_id: int) -> Sequence[SessionAttendanceRow]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                """
                SELECT a.id, a.player_id, a.attended, a.absence_reason,
                       p.name, p.last_name, p.category, p.position
                FROM attendance a
                JOIN players p ON a.player_id = p.id
                WHERE a.session_id = ?
                ORDER BY p.last_name, p.name
                """,
                (int(session_id),),
            )
            return [
                SessionAttendanceRow(
                    record_id=int(r["id"]),
                    player_id=int(r["player_id"]),
                    name=r["name"],
                    last_name=r["last_name"],
                    category=Category(r["category"]),
                    position=r.get("position"),
                    attended=bool(r["attended"]),
                    absence_reason=r.get("absence_reason"),
                )
                for r in fetchall(cur)
            ]

    def list_pending_players(self, session_id: int, owner_id: int) -> Sequence[Player]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                """
                SELECT p.id, p.name, p.last_name, p.category, p.phone, p.position,
                       p.birth_date, p.active, p.owner_id
                FROM players p
                WHERE p.owner_id = ? AND p.active = 1
                  AND p.id NOT IN (SELECT player_id FROM attendance WHERE session_id = ?)
                ORDER BY p.last_name, p.name
                """,
                (int(owner_id), int(session_id)),
            )
            return [row_to_player(r) for r in fetchall(cur)]

    def get_confirmation_by_id(self, record_id: int) -> Optional[ConfirmationRecord]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                "SELECT id, session_id, player_id, status, notes FROM training_confirmations WHERE id = ?",
                (int(record_id),),
            )
            row = fetchone(cur)
            return _to_confirmation(row) if row else None

    def upsert_confirmation(
        self,
        *,
        session_id: int,
        player_id: int,
        status: ConfirmationStatus,
        notes: Optional[str],
    ) -> ConfirmationRecord:
        with self._db.transaction() as cur:
            cur.execute(
                """
                INSERT INTO training_confirmations (session_id, player_id, status, notes)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_id, player_id) DO UPDATE SET
                    status = excluded.status,
                    notes = excluded.notes,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (int(session_id), int(player_id), status.value, notes),
            )
            cur.execute(
                """
                SELECT c.id, c.session_id, c.player_id, c.status, c.notes, p.name, p.last_name
                FROM training_confirmations c
                JOIN players p ON c.player_id = p.id
                WHERE c.session_id = ? AND c.player_id = ?
                """,
                (int(session_id), int(player_id)),
            )
            return _to_confirmation(fetchone(cur))

    def list_confirmations(self, session_id: int) -> Sequence[ConfirmationRecord]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                """
                SELECT c.id, c.session_id, c.player_id, c.status, c.notes, p.name, p.last_name
                FROM training_confirmations c
                JOIN players p ON c.player_id = p.id
                WHERE c.session_id = ?
                ORDER BY p.last_name, p.name
                """,
                (int(session_id),),
            )
            return [_to_confirmation(r) for r in fetchall(cur)]

    def session_tallies(self, owner_id: int, *, since: date) -> Sequence[SessionTally]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                """
                SELECT ts.id, ts.date,
                       COALESCE(SUM(CASE WHEN a.attended = 1 THEN 1 ELSE 0 END), 0) AS present,
                       COUNT(a.id) AS total
                FROM training_sessions ts
                LEFT JOIN attendance a ON a.session_id = ts.id
                WHERE ts.owner_id = ? AND ts.date >= ?
                GROUP BY ts.id, ts.date
                ORDER BY ts.date ASC, ts.id ASC
                """,
                (int(owner_id), since.isoformat()),
            )
            return [
                SessionTally(
                    session_id=int(r["id"]),
                    session_date=to_date(r["date"]),
                    present=int(r["present"]),
                    total=int(r["total"]),
                )
                for r in fetchall(cur)
            ]

    def category_rows(self, owner_id: int, *, since: date) -> Sequence[CategoryAttendanceRow]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                """
                SELECT p.category, ts.date, a.attended
                FROM attendance a
                JOIN players p ON a.player_id = p.id
                JOIN training_sessions ts ON a.session_id = ts.id
                WHERE ts.owner_id = ? AND p.owner_id = ? AND ts.date >= ?
                ORDER BY ts.date ASC
                """,
                (int(owner_id), int(owner_id), since.isoformat()),
            )
            return [
                CategoryAttendanceRow(
                    category=Category(r["category"]),
                    session_date=to_date(r["date"]),
                    attended=bool(r["attended"]),
                )
                for r in fetchall(cur)
            ]

    def get_report_rows(
        self,
        owner_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category: Optional[Category] = None,
        player_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ts.owner_id = ?", "p.owner_id = ?"]
        params: list[object] = [int(owner_id), int(owner_id)]

        if date_from is not None:
            clauses.append("ts.date >= ?")
            params.append(date_from.isoformat())
        if date_to is not None:
            clauses.append("ts.date <= ?")
            params.append(date_to.isoformat())
        if category is not None:
            clauses.append("p.category = ?")
            params.append(category.value)
        if player_id is not None:
            clauses.append("p.id = ?")
            params.append(int(player_id))

        where = " AND ".join(clauses)

        with self._db.transaction(write=False) as cur:
            cur.execute(
                f"""
                SELECT
                    p.id AS player_id, p.name, p.last_name, p.category, p.position,
                    ts.date, t.name AS training_name,
                    a.attended, a.absence_reason
                FROM attendance a
                JOIN players p ON a.player_id = p.id
                JOIN training_sessions ts ON a.session_id = ts.id
                LEFT JOIN trainings t ON ts.training_id = t.id
                WHERE {where}
                ORDER BY p.last_name, p.name, p.id, ts.date
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    player_id=int(r["player_id"]),
                    name=r["name"],
                    last_name=r["last_name"],
                    category=Category(r["category"]),
                    position=r.get("position"),
                    session_date=to_date(r["date"]),
                    training_name=r.get("training_name"),
                    attended=bool(r["attended"]),
                    absence_reason=r.get("absence_reason"),
                )
                for r in fetchall(cur)
            ]

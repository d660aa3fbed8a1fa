from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence, Tuple

from ..common.datetime_utils import to_date
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import fetchall, fetchone
from .model import TrainingSession
from .repository import SessionRepository

_SELECT = """
    SELECT ts.id, ts.training_id, ts.date, ts.notes, ts.owner_id,
           t.name AS training_name, t.start_time, t.end_time
    FROM training_sessions ts
    LEFT JOIN trainings t ON ts.training_id = t.id
"""


def _to_session(row: Dict[str, Any]) -> TrainingSession:
    training_id = row.get("training_id")
    return TrainingSession(
        session_id=int(row["id"]),
        date=to_date(row["date"]),
        owner_id=int(row["owner_id"]),
        training_id=int(training_id) if training_id is not None else None,
        notes=row.get("notes"),
        training_name=row.get("training_name"),
        start_time=row.get("start_time"),
        end_time=row.get("end_time"),
    )


class SQLiteSessionRepository(SessionRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_owned(self, session_id: int, owner_id: int) -> Optional[TrainingSession]:
        with self._db.transaction(write=False) as cur:
            cur.execute(f"{_SELECT} WHERE ts.id = ? AND ts.owner_id = ?", (int(session_id), int(owner_id)))
            row = fetchone(cur)
            return _to_session(row) if row else None

    def get_or_create(
        self,
        *,
        owner_id: int,
        session_date: date,
        training_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Tuple[TrainingSession, bool]:
        clauses = ["ts.owner_id = ?", "ts.date = ?"]
        params: list[object] = [int(owner_id), session_date.isoformat()]
        if training_id is not None:
            clauses.append("ts.training_id = ?")
            params.append(int(training_id))

        with self._db.transaction() as cur:
            cur.execute(f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY ts.id ASC LIMIT 1", tuple(params))
            row = fetchone(cur)
            if row:
                return _to_session(row), False

            cur.execute(
                "INSERT INTO training_sessions (date, training_id, notes, owner_id) VALUES (?, ?, ?, ?)",
                (session_date.isoformat(), training_id, notes, int(owner_id)),
            )
            cur.execute(f"{_SELECT} WHERE ts.id = ?", (int(cur.lastrowid),))
            return _to_session(fetchone(cur)), True

    def list_owned(
        self,
        owner_id: int,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        training_id: Optional[int] = None,
    ) -> Sequence[TrainingSession]:
        clauses = ["ts.owner_id = ?"]
        params: list[object] = [int(owner_id)]

        if date_from is not None:
            clauses.append("ts.date >= ?")
            params.append(date_from.isoformat())
        if date_to is not None:
            clauses.append("ts.date <= ?")
            params.append(date_to.isoformat())
        if training_id is not None:
            clauses.append("ts.training_id = ?")
            params.append(int(training_id))

        with self._db.transaction(write=False) as cur:
            cur.execute(f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY ts.date DESC, ts.id DESC", tuple(params))
            return [_to_session(r) for r in fetchall(cur)]

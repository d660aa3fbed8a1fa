from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import as_db_bool, fetchall, fetchone
from .model import TrainingTemplate
from .repository import TrainingRepository

_COLUMNS = "id, day_of_week, start_time, end_time, name, active, owner_id"


def _to_training(row: Dict[str, Any]) -> TrainingTemplate:
    return TrainingTemplate(
        training_id=int(row["id"]),
        day_of_week=int(row["day_of_week"]),
        start_time=row["start_time"],
        end_time=row["end_time"],
        owner_id=int(row["owner_id"]),
        name=row.get("name"),
        is_active=bool(row.get("active", 1)),
    )


class SQLiteTrainingRepository(TrainingRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_owned(self, training_id: int, owner_id: int) -> Optional[TrainingTemplate]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM trainings WHERE id = ? AND owner_id = ?",
                (int(training_id), int(owner_id)),
            )
            row = fetchone(cur)
            return _to_training(row) if row else None

    def list_owned(self, owner_id: int, *, active: Optional[bool] = None) -> Sequence[TrainingTemplate]:
        clauses = ["owner_id = ?"]
        params: list[object] = [int(owner_id)]
        if active is not None:
            clauses.append("active = ?")
            params.append(as_db_bool(active))

        with self._db.transaction(write=False) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM trainings WHERE {' AND '.join(clauses)} ORDER BY day_of_week, start_time",
                tuple(params),
            )
            return [_to_training(r) for r in fetchall(cur)]

    def create(self, *, owner_id: int, day_of_week: int, start_time: str, end_time: str, name: str) -> int:
        with self._db.transaction() as cur:
            cur.execute(
                """
                INSERT INTO trainings (day_of_week, start_time, end_time, name, owner_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (int(day_of_week), start_time, end_time, name, int(owner_id)),
            )
            return int(cur.lastrowid)

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
        with self._db.transaction() as cur:
            cur.execute(
                """
                UPDATE trainings SET
                    day_of_week = COALESCE(?, day_of_week),
                    start_time = COALESCE(?, start_time),
                    end_time = COALESCE(?, end_time),
                    name = COALESCE(?, name),
                    active = COALESCE(?, active),
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ? AND owner_id = ?
                """,
                (day_of_week, start_time, end_time, name, as_db_bool(is_active), int(training_id), int(owner_id)),
            )
            return cur.rowcount > 0

    def delete_detaching_sessions(self, training_id: int, owner_id: int) -> bool:
        with self._db.transaction() as cur:
            cur.execute("SELECT id FROM trainings WHERE id = ? AND owner_id = ?", (int(training_id), int(owner_id)))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE training_sessions SET training_id = NULL WHERE training_id = ?", (int(training_id),))
            cur.execute("DELETE FROM trainings WHERE id = ?", (int(training_id),))
            return cur.rowcount > 0

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import to_date
from ..core.enums import Category
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import as_db_bool, fetchall, fetchone
from .model import Player
from .repository import PlayerRepository

_COLUMNS = "id, name, last_name, category, phone, position, birth_date, active, owner_id"
_UPDATABLE = ("name", "last_name", "category", "phone", "position", "birth_date")


def row_to_player(row: Dict[str, Any]) -> Player:
    return Player(
        player_id=int(row["id"]),
        name=row["name"],
        last_name=row["last_name"],
        category=Category(row["category"]),
        owner_id=int(row["owner_id"]),
        phone=row.get("phone"),
        position=row.get("position"),
        birth_date=to_date(row.get("birth_date")),
        is_active=bool(row.get("active", 1)),
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, Category):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


class SQLitePlayerRepository(PlayerRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_owned(self, player_id: int, owner_id: int) -> Optional[Player]:
        with self._db.transaction(write=False) as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM players WHERE id = ? AND owner_id = ?",
                (int(player_id), int(owner_id)),
            )
            row = fetchone(cur)
            return row_to_player(row) if row else None

    def list_owned(
        self,
        owner_id: int,
        *,
        active: Optional[bool] = None,
        category: Optional[Category] = None,
    ) -> Sequence[Player]:
        clauses = ["owner_id = ?"]
        params: list[object] = [int(owner_id)]

        if active is not None:
            clauses.append("active = ?")
            params.append(as_db_bool(active))
        if category is not None:
            clauses.append("category = ?")
            params.append(category.value)

        where = " AND ".join(clauses)

        with self._db.transaction(write=False) as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM players WHERE {where} ORDER BY last_name, name", tuple(params))
            return [row_to_player(r) for r in fetchall(cur)]

    def count_active(self, owner_id: int) -> int:
        with self._db.transaction(write=False) as cur:
            cur.execute("SELECT COUNT(*) AS count FROM players WHERE owner_id = ? AND active = 1", (int(owner_id),))
            return int(fetchone(cur)["count"])

    def create(
        self,
        *,
        owner_id: int,
        name: str,
        last_name: str,
        category: Category,
        phone: Optional[str] = None,
        position: Optional[str] = None,
        birth_date: Optional[date] = None,
    ) -> int:
        with self._db.transaction() as cur:
            cur.execute(
                """
                INSERT INTO players (name, last_name, phone, position, birth_date, category, owner_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, last_name, phone, position, _db_value(birth_date), category.value, int(owner_id)),
            )
            return int(cur.lastrowid)

    def update(self, player_id: int, owner_id: int, **fields) -> bool:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise TypeError(f"Unknown player fields: {sorted(unknown)}")

        assignments = [f"{col} = COALESCE(?, {col})" for col in _UPDATABLE]
        params = [_db_value(fields.get(col)) for col in _UPDATABLE]

        with self._db.transaction() as cur:
            cur.execute(
                f"""
                UPDATE players SET {", ".join(assignments)}, updated_at = CURRENT_TIMESTAMP
                WHERE id = ? AND owner_id = ?
                """,
                (*params, int(player_id), int(owner_id)),
            )
            return cur.rowcount > 0

    def set_active(self, player_id: int, owner_id: int, *, is_active: bool) -> bool:
        with self._db.transaction() as cur:
            cur.execute(
                "UPDATE players SET active = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND owner_id = ?",
                (as_db_bool(is_active), int(player_id), int(owner_id)),
            )
            return cur.rowcount > 0

    def delete_with_attendance(self, player_id: int, owner_id: int) -> bool:
        with self._db.transaction() as cur:
            cur.execute("SELECT id FROM players WHERE id = ? AND owner_id = ?", (int(player_id), int(owner_id)))
            if not fetchone(cur):
                return False
            # Children first, then the player.
            cur.execute("DELETE FROM attendance WHERE player_id = ?", (int(player_id),))
            cur.execute("DELETE FROM training_confirmations WHERE player_id = ?", (int(player_id),))
            cur.execute("DELETE FROM players WHERE id = ?", (int(player_id),))
            return cur.rowcount > 0

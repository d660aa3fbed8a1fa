from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import as_db_bool, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, email, password, name, role, active, created_at"


def _to_user(row: Dict[str, Any]) -> User:
    created = row.get("created_at")
    return User(
        user_id=int(row["id"]),
        email=row["email"],
        password_hash=row["password"],
        name=row["name"],
        role=Role(row["role"]),
        is_active=bool(row.get("active", 1)),
        created_at=datetime.fromisoformat(created) if created else None,
    )


class SQLiteUserRepository(UserRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._db.transaction(write=False) as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id = ?", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self._db.transaction(write=False) as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email = ?", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with self._db.transaction(write=False) as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name")
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(self, *, email: str, password_hash: str, name: str, role: Role) -> int:
        with self._db.transaction() as cur:
            cur.execute(
                "INSERT INTO users (email, password, name, role) VALUES (?, ?, ?, ?)",
                (email, password_hash, name, role.value),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        user_id: int,
        *,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
    ) -> bool:
        with self._db.transaction() as cur:
            cur.execute(
                """
                UPDATE users SET
                    email = COALESCE(?, email),
                    password = COALESCE(?, password),
                    name = COALESCE(?, name),
                    role = COALESCE(?, role),
                    active = COALESCE(?, active),
                    updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (email, password_hash, name, role.value if role else None, as_db_bool(is_active), int(user_id)),
            )
            return cur.rowcount > 0

    def delete_with_owned_data(self, user_id: int) -> bool:
        user_id = int(user_id)
        with self._db.transaction() as cur:
            # Children first: no store-level cascade is relied upon.
            for table in ("attendance", "training_confirmations"):
                cur.execute(
                    f"""
                    DELETE FROM {table}
                    WHERE session_id IN (SELECT id FROM training_sessions WHERE owner_id = ?)
                       OR player_id IN (SELECT id FROM players WHERE owner_id = ?)
                    """,
                    (user_id, user_id),
                )
            cur.execute("DELETE FROM training_sessions WHERE owner_id = ?", (user_id,))
            cur.execute("DELETE FROM trainings WHERE owner_id = ?", (user_id,))
            cur.execute("DELETE FROM players WHERE owner_id = ?", (user_id,))
            cur.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cur.rowcount > 0

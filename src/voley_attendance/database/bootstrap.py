from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_ADMIN_NAME, DEFAULT_TRAININGS
from ..core.enums import Role
from .connection import DatabaseConnection
from .sqlite_base import fetchone, has_column

logger = logging.getLogger(__name__)

# Owner columns are added by migrations, not here: a fresh store walks the
# same upgrade path as a legacy one.
BASE_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT UNIQUE NOT NULL,
    password TEXT NOT NULL,
    name TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user' CHECK(role IN ('admin', 'user')),
    active INTEGER NOT NULL DEFAULT 1,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    phone TEXT,
    position TEXT,
    birth_date DATE,
    category TEXT NOT NULL CHECK(category IN ('cadete', 'juvenil', 'junior', 'senior')),
    active INTEGER NOT NULL DEFAULT 1,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS trainings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    day_of_week INTEGER NOT NULL CHECK(day_of_week BETWEEN 0 AND 6),
    start_time TEXT NOT NULL,
    end_time TEXT NOT NULL,
    name TEXT,
    active INTEGER NOT NULL DEFAULT 1,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS training_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    training_id INTEGER,
    date DATE NOT NULL,
    notes TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (training_id) REFERENCES trainings(id)
);

CREATE TABLE IF NOT EXISTS attendance (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL,
    player_id INTEGER NOT NULL,
    attended INTEGER NOT NULL DEFAULT 0,
    absence_reason TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (session_id) REFERENCES training_sessions(id),
    FOREIGN KEY (player_id) REFERENCES players(id),
    UNIQUE(session_id, player_id)
);

CREATE TABLE IF NOT EXISTS migrations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    executed_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_attendance_session ON attendance(session_id);
CREATE INDEX IF NOT EXISTS idx_attendance_player ON attendance(player_id);
CREATE INDEX IF NOT EXISTS idx_sessions_date ON training_sessions(date);
CREATE INDEX IF NOT EXISTS idx_players_category ON players(category);
"""


def apply_schema(db: DatabaseConnection) -> None:
    db.executescript(BASE_SCHEMA)


def first_admin_id(cur) -> Optional[int]:
    cur.execute("SELECT id FROM users WHERE role = 'admin' ORDER BY id ASC LIMIT 1")
    row = fetchone(cur)
    return int(row["id"]) if row else None


def ensure_default_admin(db: DatabaseConnection, *, email: str, password: str) -> Optional[int]:
    """Create the bootstrap admin account if its email is not registered yet.

    Returns the new user id, or None when it already existed.
    """
    email = email.strip().lower()
    with db.transaction() as cur:
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if fetchone(cur):
            return None
        cur.execute(
            "INSERT INTO users (email, password, name, role) VALUES (?, ?, ?, ?)",
            (email, generate_password_hash(password), DEFAULT_ADMIN_NAME, Role.ADMIN.value),
        )
        user_id = int(cur.lastrowid)
    logger.info("Default admin created: %s", email)
    return user_id


def seed_default_trainings(db: DatabaseConnection) -> int:
    """Insert the default weekly templates when the table is empty.

    Templates are owned by the first admin; runs after migrations.
    """
    with db.transaction() as cur:
        cur.execute("SELECT COUNT(*) AS count FROM trainings")
        if int(fetchone(cur)["count"]) > 0:
            return 0
        if not has_column(cur, "trainings", "owner_id"):
            logger.warning("trainings.owner_id missing, default trainings not seeded")
            return 0
        owner_id = first_admin_id(cur)
        if owner_id is None:
            return 0
        cur.executemany(
            "INSERT INTO trainings (day_of_week, start_time, end_time, name, owner_id) VALUES (?, ?, ?, ?, ?)",
            [(day, start, end, name, owner_id) for day, start, end, name in DEFAULT_TRAININGS],
        )
    logger.info("Default trainings created")
    return len(DEFAULT_TRAININGS)


def list_tables(db: DatabaseConnection) -> list[str]:
    with db.transaction(write=False) as cur:
        cur.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name")
        return [r["name"] for r in cur.fetchall()]

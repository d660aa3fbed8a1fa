"""Migration engine.

Named, ordered schema upgrades recorded in the ``migrations`` ledger. The
ledger is the only thing consulted to decide whether a migration runs; each
migration still guards its own DDL so a re-run after a partial failure is safe.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .bootstrap import first_admin_id
from .connection import DatabaseConnection
from .sqlite_base import fetchall, has_column

logger = logging.getLogger(__name__)

MigrationFn = Callable[[sqlite3.Cursor], None]


@dataclass(frozen=True)
class Migration:
    name: str
    up: MigrationFn


LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS migrations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    executed_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


def _add_owner_column(table: str) -> MigrationFn:
    def up(cur: sqlite3.Cursor) -> None:
        if has_column(cur, table, "owner_id"):
            return
        cur.execute(f"ALTER TABLE {table} ADD COLUMN owner_id INTEGER REFERENCES users(id)")

        # Existing rows belong to the first admin.
        admin_id = first_admin_id(cur)
        if admin_id is not None:
            cur.execute(f"UPDATE {table} SET owner_id = ? WHERE owner_id IS NULL", (admin_id,))

    return up


def _create_owner_indexes(cur: sqlite3.Cursor) -> None:
    cur.execute("CREATE INDEX IF NOT EXISTS idx_players_owner ON players(owner_id)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_trainings_owner ON trainings(owner_id)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_sessions_owner ON training_sessions(owner_id)")


def _create_training_confirmations(cur: sqlite3.Cursor) -> None:
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS training_confirmations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            session_id INTEGER NOT NULL,
            player_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('confirmed', 'declined', 'pending')),
            notes TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (session_id) REFERENCES training_sessions(id),
            FOREIGN KEY (player_id) REFERENCES players(id),
            UNIQUE(session_id, player_id)
        )
        """
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_confirmations_session ON training_confirmations(session_id)")


MIGRATIONS: tuple[Migration, ...] = (
    Migration("001_add_owner_to_players", _add_owner_column("players")),
    Migration("002_add_owner_to_trainings", _add_owner_column("trainings")),
    Migration("003_add_owner_to_training_sessions", _add_owner_column("training_sessions")),
    Migration("004_create_owner_indexes", _create_owner_indexes),
    Migration("005_create_training_confirmations", _create_training_confirmations),
)


def applied_migrations(db: DatabaseConnection) -> list[str]:
    with db.transaction(write=False) as cur:
        cur.execute("SELECT name FROM migrations ORDER BY id ASC")
        return [r["name"] for r in fetchall(cur)]


def apply_migrations(db: DatabaseConnection, migrations: Optional[Sequence[Migration]] = None) -> list[str]:
    """Run every migration missing from the ledger, in declared order.

    A failing migration is logged and skipped: nothing is recorded for it and
    the next one still runs. Returns the names applied by this call.
    """
    migrations = MIGRATIONS if migrations is None else migrations

    with db.transaction() as cur:
        cur.execute(LEDGER_DDL)
    done = set(applied_migrations(db))

    applied: list[str] = []
    for migration in migrations:
        if migration.name in done:
            logger.debug("Migration already applied: %s", migration.name)
            continue
        try:
            with db.transaction() as cur:
                migration.up(cur)
                cur.execute("INSERT INTO migrations (name) VALUES (?)", (migration.name,))
        except Exception:
            logger.exception("Migration failed: %s", migration.name)
            continue
        applied.append(migration.name)
        logger.info("Migration applied: %s", migration.name)

    return applied

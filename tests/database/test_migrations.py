from __future__ import annotations

import pytest

from voley_attendance.database.bootstrap import apply_schema, ensure_default_admin
from voley_attendance.database.connection import DatabaseConnection, DBConfig
from voley_attendance.database.migrations import MIGRATIONS, Migration, applied_migrations, apply_migrations
from voley_attendance.database.sqlite_base import has_column


@pytest.fixture
def legacy_db(tmp_path):
    """A store with the base schema and an admin, but no migration applied."""
    db = DatabaseConnection(DBConfig(path=str(tmp_path / "legacy.db"))).open()
    apply_schema(db)
    ensure_default_admin(db, email="admin@voley.com", password="admin123")
    yield db
    db.close()


def _schema_version(db) -> int:
    with db.transaction(write=False) as cur:
        return int(cur.execute("PRAGMA schema_version").fetchone()[0])


def test_fresh_store_has_every_migration_recorded(db):
    assert applied_migrations(db) == [m.name for m in MIGRATIONS]

    with db.transaction(write=False) as cur:
        for table in ("players", "trainings", "training_sessions"):
            assert has_column(cur, table, "owner_id")
        cur.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'training_confirmations'")
        assert cur.fetchone() is not None


def test_second_run_changes_nothing(db, count_rows):
    version = _schema_version(db)
    ledger = count_rows("SELECT COUNT(*) FROM migrations")

    assert apply_migrations(db) == []
    assert _schema_version(db) == version
    assert count_rows("SELECT COUNT(*) FROM migrations") == ledger


def test_backfills_existing_rows_to_first_admin(legacy_db):
    with legacy_db.transaction() as cur:
        cur.execute("INSERT INTO players (name, last_name, category) VALUES ('Ana', 'Ruiz', 'senior')")
        cur.execute("INSERT INTO trainings (day_of_week, start_time, end_time) VALUES (1, '19:00', '21:00')")
        cur.execute("SELECT id FROM users WHERE role = 'admin'")
        admin_id = cur.fetchone()["id"]

    applied = apply_migrations(legacy_db)

    assert applied == [m.name for m in MIGRATIONS]
    with legacy_db.transaction(write=False) as cur:
        assert cur.execute("SELECT owner_id FROM players").fetchone()[0] == admin_id
        assert cur.execute("SELECT owner_id FROM trainings").fetchone()[0] == admin_id


def test_failed_migration_is_not_recorded_and_engine_continues(legacy_db):
    def create_a(cur):
        cur.execute("CREATE TABLE a (id INTEGER PRIMARY KEY)")

    def broken(cur):
        cur.execute("CREATE TABLE half_done (id INTEGER PRIMARY KEY)")
        raise RuntimeError("backfill failed")

    def create_c(cur):
        cur.execute("CREATE TABLE c (id INTEGER PRIMARY KEY)")

    migrations = [Migration("100_a", create_a), Migration("101_broken", broken), Migration("102_c", create_c)]

    assert apply_migrations(legacy_db, migrations) == ["100_a", "102_c"]
    assert applied_migrations(legacy_db) == ["100_a", "102_c"]
    with legacy_db.transaction(write=False) as cur:
        cur.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'half_done'")
        assert cur.fetchone() is None


def test_migration_body_is_safe_to_reinvoke(db):
    # Schema change done, ledger row lost.
    with db.transaction() as cur:
        cur.execute("DELETE FROM migrations WHERE name = '001_add_owner_to_players'")

    assert apply_migrations(db) == ["001_add_owner_to_players"]
    assert "001_add_owner_to_players" in applied_migrations(db)


def test_migrations_run_in_declared_order(legacy_db):
    seen = []
    migrations = [Migration(f"20{i}_step", lambda cur, i=i: seen.append(i)) for i in range(3)]

    apply_migrations(legacy_db, migrations)

    assert seen == [0, 1, 2]

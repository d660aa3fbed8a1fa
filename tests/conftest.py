from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from voley_attendance.container import build_container
from voley_attendance.core.enums import Role
from voley_attendance.database.connection import DatabaseConnection, DBConfig
from voley_attendance.main import prepare_store

ADMIN_EMAIL = "admin@voley.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture
def db(tmp_path):
    conn = DatabaseConnection(DBConfig(path=str(tmp_path / "voley.db"))).open()
    prepare_store(conn, admin_email=ADMIN_EMAIL, admin_password=ADMIN_PASSWORD, seed_trainings=False)
    yield conn
    conn.close()


@pytest.fixture
def container(db):
    return build_container(db)


@pytest.fixture
def admin_id(container):
    return container.users_repo.get_by_email(ADMIN_EMAIL).user_id


def _create_user(container, email: str, name: str) -> int:
    return container.users_repo.create_user(
        email=email,
        password_hash=generate_password_hash("secret1"),
        name=name,
        role=Role.USER,
    )


@pytest.fixture
def tenant_a(container):
    return _create_user(container, "coach.a@voley.com", "Coach A")


@pytest.fixture
def tenant_b(container):
    return _create_user(container, "coach.b@voley.com", "Coach B")


@pytest.fixture
def make_player(container):
    counter = {"n": 0}

    def _make(tenant_id: int, *, category: str = "senior", last_name: str | None = None, **extra):
        counter["n"] += 1
        return container.player_service.create_player(
            tenant_id,
            name=extra.pop("name", f"Jugador{counter['n']}"),
            last_name=last_name or f"Apellido{counter['n']:02d}",
            category=category,
            **extra,
        )

    return _make


@pytest.fixture
def make_session(container):
    def _make(tenant_id: int, day: date, training_id: int | None = None):
        return container.session_service.resolve_session(tenant_id, day, training_id=training_id)

    return _make


@pytest.fixture
def count_rows(db):
    def _count(sql: str, params=()) -> int:
        with db.transaction(write=False) as cur:
            cur.execute(sql, params)
            return int(cur.fetchone()[0])

    return _count

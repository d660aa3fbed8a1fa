from __future__ import annotations

from datetime import date

import pytest

from voley_attendance.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def monday(container, tenant_a):
    return container.training_service.create_training(tenant_a, day_of_week=1, start_time="19:00", end_time="21:00")


@pytest.fixture
def wednesday(container, tenant_a):
    return container.training_service.create_training(tenant_a, day_of_week=3, start_time="21:00", end_time="23:00")


def test_resolve_is_idempotent(container, tenant_a, monday, count_rows):
    first = container.session_service.resolve_session(tenant_a, "2026-03-02", training_id=monday.training_id)
    second = container.session_service.resolve_session(tenant_a, "2026-03-02", training_id=monday.training_id)

    assert first.session_id == second.session_id
    assert count_rows("SELECT COUNT(*) FROM training_sessions") == 1


def test_new_session_carries_template_and_notes(container, tenant_a, monday):
    session = container.session_service.resolve_session(
        tenant_a, date(2026, 3, 2), training_id=monday.training_id, notes="  partido amistoso "
    )

    assert session.owner_id == tenant_a
    assert session.training_id == monday.training_id
    assert session.training_name == "Lunes"
    assert session.start_time == "19:00"
    assert session.notes == "partido amistoso"


def test_without_template_matches_any_session_that_day(container, tenant_a, monday):
    with_template = container.session_service.resolve_session(tenant_a, "2026-03-02", training_id=monday.training_id)
    any_session = container.session_service.resolve_session(tenant_a, "2026-03-02")

    assert any_session.session_id == with_template.session_id


def test_different_template_same_day_is_a_different_session(container, tenant_a, monday, wednesday):
    a = container.session_service.resolve_session(tenant_a, "2026-03-02", training_id=monday.training_id)
    b = container.session_service.resolve_session(tenant_a, "2026-03-02", training_id=wednesday.training_id)

    assert a.session_id != b.session_id


def test_sessions_are_per_tenant(container, tenant_a, tenant_b):
    a = container.session_service.resolve_session(tenant_a, "2026-03-02")
    b = container.session_service.resolve_session(tenant_b, "2026-03-02")

    assert a.session_id != b.session_id
    assert b.owner_id == tenant_b


def test_foreign_template_is_not_found(container, tenant_b, monday, count_rows):
    with pytest.raises(NotFoundError):
        container.session_service.resolve_session(tenant_b, "2026-03-02", training_id=monday.training_id)
    assert count_rows("SELECT COUNT(*) FROM training_sessions") == 0


@pytest.mark.parametrize("bad", ["", "02/03/2026", "2026-02-30", None])
def test_bad_date_is_rejected(container, tenant_a, bad):
    with pytest.raises(ValidationError):
        container.session_service.resolve_session(tenant_a, bad)


def test_list_sessions_newest_first_with_filters(container, tenant_a, tenant_b, monday):
    for day in ("2026-03-02", "2026-03-09", "2026-03-16"):
        container.session_service.resolve_session(tenant_a, day, training_id=monday.training_id)
    container.session_service.resolve_session(tenant_a, "2026-03-04")
    container.session_service.resolve_session(tenant_b, "2026-03-05")

    all_a = container.session_service.list_sessions(tenant_a)
    assert [s.date.isoformat() for s in all_a] == ["2026-03-16", "2026-03-09", "2026-03-04", "2026-03-02"]

    ranged = container.session_service.list_sessions(tenant_a, date_from="2026-03-03", date_to="2026-03-10")
    assert [s.date.isoformat() for s in ranged] == ["2026-03-09", "2026-03-04"]

    by_template = container.session_service.list_sessions(tenant_a, training_id=monday.training_id)
    assert len(by_template) == 3


def test_session_detail(container, tenant_a, make_player):
    present = make_player(tenant_a, last_name="Alonso")
    pending = make_player(tenant_a, last_name="Blanco")
    inactive = make_player(tenant_a, last_name="Castro")
    container.player_service.toggle_active(tenant_a, inactive.player_id)

    session = container.session_service.resolve_session(tenant_a, "2026-03-02")
    container.attendance_service.record_attendance(tenant_a, session.session_id, present.player_id, True)
    container.attendance_service.set_confirmation(tenant_a, session.session_id, pending.player_id, "declined")

    detail = container.session_service.get_session_detail(session.session_id, tenant_a)

    assert detail.session.session_id == session.session_id
    assert [r.player_id for r in detail.attendance] == [present.player_id]
    assert [p.player_id for p in detail.pending_players] == [pending.player_id]
    assert [(c.player_id, c.status.value) for c in detail.confirmations] == [(pending.player_id, "declined")]

    payload = detail.to_dict()
    assert set(payload) == {"session", "attendance", "pending_players", "confirmations"}


def test_session_detail_of_foreign_session_is_not_found(container, tenant_a, tenant_b):
    session = container.session_service.resolve_session(tenant_a, "2026-03-02")

    with pytest.raises(NotFoundError):
        container.session_service.get_session_detail(session.session_id, tenant_b)

from __future__ import annotations

from datetime import date

import pytest

from voley_attendance.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def session(make_session, tenant_a):
    return make_session(tenant_a, date(2026, 3, 2))


@pytest.fixture
def player(make_player, tenant_a):
    return make_player(tenant_a)


def test_second_upsert_overwrites_the_first(container, tenant_a, session, player, count_rows):
    svc = container.attendance_service
    first = svc.record_attendance(tenant_a, session.session_id, player.player_id, False, "lesión")
    second = svc.record_attendance(tenant_a, session.session_id, player.player_id, True)

    assert first.record_id == second.record_id
    assert count_rows("SELECT COUNT(*) FROM attendance") == 1
    stored = container.attendance_repo.get_for_session_and_player(session.session_id, player.player_id)
    assert stored.attended is True
    assert stored.absence_reason is None


def test_attended_forces_reason_to_null(container, tenant_a, session, player):
    record = container.attendance_service.record_attendance(
        tenant_a, session.session_id, player.player_id, True, "sick"
    )

    assert record.absence_reason is None


def test_absence_keeps_reason_and_blank_reason_is_null(container, tenant_a, session, make_player, player):
    other = make_player(tenant_a)
    svc = container.attendance_service

    assert svc.record_attendance(tenant_a, session.session_id, player.player_id, False, " trabajo ").absence_reason == "trabajo"
    assert svc.record_attendance(tenant_a, session.session_id, other.player_id, False, "   ").absence_reason is None


@pytest.mark.parametrize("attended", ["true", 1, None])
def test_attended_must_be_boolean(container, tenant_a, session, player, attended, count_rows):
    with pytest.raises(ValidationError):
        container.attendance_service.record_attendance(tenant_a, session.session_id, player.player_id, attended)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


@pytest.mark.parametrize("offset", [0.9, 0.5])
def test_fractional_session_id_is_rejected(container, tenant_a, session, player, offset, count_rows):
    with pytest.raises(ValidationError):
        container.attendance_service.record_attendance(
            tenant_a, session.session_id + offset, player.player_id, False
        )
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_foreign_session_is_not_found_and_nothing_written(
    container, tenant_b, session, make_player, count_rows
):
    foreign_player = make_player(tenant_b)

    with pytest.raises(NotFoundError):
        container.attendance_service.record_attendance(tenant_b, session.session_id, foreign_player.player_id, True)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_foreign_player_is_not_found_and_nothing_written(
    container, tenant_a, tenant_b, session, make_player, count_rows
):
    foreign_player = make_player(tenant_b)

    with pytest.raises(NotFoundError):
        container.attendance_service.record_attendance(tenant_a, session.session_id, foreign_player.player_id, True)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_update_record_marks_present_and_clears_reason(container, tenant_a, session, player):
    svc = container.attendance_service
    record = svc.record_attendance(tenant_a, session.session_id, player.player_id, False, "viaje")

    updated = svc.update_record(tenant_a, record.record_id, attended=True, reason="still here")

    assert updated.attended is True
    assert updated.absence_reason is None


def test_update_record_changes_reason_only(container, tenant_a, session, player):
    svc = container.attendance_service
    record = svc.record_attendance(tenant_a, session.session_id, player.player_id, False, "viaje")

    updated = svc.update_record(tenant_a, record.record_id, reason="enfermedad")

    assert updated.attended is False
    assert updated.absence_reason == "enfermedad"


def test_update_and_delete_of_foreign_record_are_not_found(container, tenant_a, tenant_b, session, player):
    svc = container.attendance_service
    record = svc.record_attendance(tenant_a, session.session_id, player.player_id, True)

    with pytest.raises(NotFoundError):
        svc.update_record(tenant_b, record.record_id, attended=False)
    with pytest.raises(NotFoundError):
        svc.delete_record(tenant_b, record.record_id)

    assert container.attendance_repo.get_by_id(record.record_id).attended is True


def test_delete_record(container, tenant_a, session, player):
    svc = container.attendance_service
    record = svc.record_attendance(tenant_a, session.session_id, player.player_id, True)

    svc.delete_record(tenant_a, record.record_id)

    assert container.attendance_repo.get_by_id(record.record_id) is None


def test_player_stats(container, tenant_a, make_session, player):
    svc = container.attendance_service
    marks = [
        (date(2026, 3, 2), True, None),
        (date(2026, 3, 4), False, "trabajo"),
        (date(2026, 3, 9), True, None),
        (date(2026, 3, 11), False, None),
    ]
    for day, attended, reason in marks:
        s = make_session(tenant_a, day)
        svc.record_attendance(tenant_a, s.session_id, player.player_id, attended, reason)

    stats = svc.get_player_stats(tenant_a, player.player_id)

    assert (stats.total_sessions, stats.attended, stats.missed) == (4, 2, 2)
    assert stats.attendance_rate == "50.0"
    assert stats.absences == [
        {"date": "2026-03-11", "reason": "Sin motivo"},
        {"date": "2026-03-04", "reason": "trabajo"},
    ]

    ranged = svc.get_player_stats(tenant_a, player.player_id, date_from="2026-03-05")
    assert (ranged.total_sessions, ranged.attendance_rate) == (2, "50.0")


def test_player_stats_without_sessions(container, tenant_a, player):
    stats = container.attendance_service.get_player_stats(tenant_a, player.player_id)

    assert stats.total_sessions == 0
    assert stats.attendance_rate == "0.0"
    assert stats.absences == []

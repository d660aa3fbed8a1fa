from __future__ import annotations

from datetime import date

import pytest

from voley_attendance.attendance.model import BulkItem
from voley_attendance.attendance.service import AttendanceService
from voley_attendance.core.exceptions import NotFoundError, StoreError, ValidationError


@pytest.fixture
def session(make_session, tenant_a):
    return make_session(tenant_a, date(2026, 3, 2))


@pytest.fixture
def roster(make_player, tenant_a):
    return [make_player(tenant_a) for _ in range(5)]


def _rows(container, session_id):
    return {r.player_id: r for r in container.attendance_repo.list_for_session(session_id)}


def test_bulk_applies_every_item(container, tenant_a, session, roster):
    items = [
        {"player_id": p.player_id, "attended": i % 2 == 0, "absence_reason": "lluvia"}
        for i, p in enumerate(roster)
    ]

    result = container.attendance_service.record_attendance_bulk(tenant_a, session.session_id, items)

    assert result.count == 5
    assert result.skipped_player_ids == []
    rows = _rows(container, session.session_id)
    assert rows[roster[0].player_id].absence_reason is None
    assert rows[roster[1].player_id].absence_reason == "lluvia"


def test_bulk_is_an_upsert(container, tenant_a, session, roster, count_rows):
    svc = container.attendance_service
    svc.record_attendance(tenant_a, session.session_id, roster[0].player_id, False, "viaje")

    svc.record_attendance_bulk(tenant_a, session.session_id, [BulkItem(roster[0].player_id, True, "ignored")])

    assert count_rows("SELECT COUNT(*) FROM attendance") == 1
    row = _rows(container, session.session_id)[roster[0].player_id]
    assert (row.attended, row.absence_reason) == (True, None)


def test_foreign_players_are_skipped_and_reported(container, tenant_a, tenant_b, session, roster, make_player):
    foreign = make_player(tenant_b)
    items = [{"player_id": roster[0].player_id, "attended": True}, {"player_id": foreign.player_id, "attended": True}]

    result = container.attendance_service.record_attendance_bulk(tenant_a, session.session_id, items)

    assert result.count == 1
    assert result.skipped_player_ids == [foreign.player_id]
    assert list(_rows(container, session.session_id)) == [roster[0].player_id]


def test_strict_policy_aborts_the_whole_batch(container, tenant_a, tenant_b, session, roster, make_player, count_rows):
    foreign = make_player(tenant_b)
    strict = AttendanceService(container.attendance_repo, container.guard, skip_foreign_players=False)
    items = [{"player_id": p.player_id, "attended": True} for p in roster[:2]]
    items.append({"player_id": foreign.player_id, "attended": True})

    with pytest.raises(NotFoundError):
        strict.record_attendance_bulk(tenant_a, session.session_id, items)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_foreign_session_aborts_before_any_write(container, tenant_b, session, make_player, count_rows):
    player_b = make_player(tenant_b)

    with pytest.raises(NotFoundError):
        container.attendance_service.record_attendance_bulk(
            tenant_b, session.session_id, [{"player_id": player_b.player_id, "attended": True}]
        )
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_store_failure_rolls_back_every_item(db, container, tenant_a, session, roster, count_rows):
    doomed = roster[3].player_id
    with db.transaction() as cur:
        cur.execute(
            f"""
            CREATE TRIGGER fail_one_player BEFORE INSERT ON attendance
            WHEN NEW.player_id = {int(doomed)}
            BEGIN
                SELECT RAISE(ABORT, 'simulated store failure');
            END
            """
        )
    items = [{"player_id": p.player_id, "attended": True} for p in roster]

    with pytest.raises(StoreError):
        container.attendance_service.record_attendance_bulk(tenant_a, session.session_id, items)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


def test_invalid_item_rejects_the_batch_before_writing(container, tenant_a, session, roster, count_rows):
    items = [
        {"player_id": roster[0].player_id, "attended": True},
        {"player_id": roster[1].player_id, "attended": "yes"},
    ]

    with pytest.raises(ValidationError):
        container.attendance_service.record_attendance_bulk(tenant_a, session.session_id, items)
    assert count_rows("SELECT COUNT(*) FROM attendance") == 0


@pytest.mark.parametrize("items", [None, "not-a-list", {"player_id": 1}])
def test_items_must_be_a_list(container, tenant_a, session, items):
    with pytest.raises(ValidationError):
        container.attendance_service.record_attendance_bulk(tenant_a, session.session_id, items)

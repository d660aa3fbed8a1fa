from __future__ import annotations

from datetime import date, timedelta

import pytest

TODAY = date(2026, 6, 15)


@pytest.fixture
def record(container, tenant_a, make_session):
    def _record(days_ago: int, marks):
        session = make_session(tenant_a, TODAY - timedelta(days=days_ago))
        for player, attended in marks:
            container.attendance_service.record_attendance(tenant_a, session.session_id, player.player_id, attended)
        return session

    return _record


def test_dashboard_metrics(container, tenant_a, tenant_b, make_player, make_session, record):
    seniors = [make_player(tenant_a, category="senior") for _ in range(4)]
    inactive = make_player(tenant_a, category="juvenil")
    container.player_service.toggle_active(tenant_a, inactive.player_id)
    make_player(tenant_b)
    container.training_service.create_training(tenant_a, day_of_week=1, start_time="19:00", end_time="21:00")
    retired = container.training_service.create_training(tenant_a, day_of_week=2, start_time="19:00", end_time="21:00")
    container.training_service.update_training(tenant_a, retired.training_id, active=False)

    record(3, [(seniors[0], True), (seniors[1], True), (seniors[2], True), (seniors[3], False)])
    record(10, [(seniors[0], True), (seniors[1], True), (seniors[2], False), (seniors[3], False)])
    make_session(tenant_a, TODAY - timedelta(days=5))  # no rows: excluded
    record(45, [(seniors[0], False)])  # outside the 30-day window

    metrics = container.analytics_service.get_dashboard_metrics(tenant_a, today=TODAY)

    assert metrics.total_players == 4
    assert metrics.avg_attendance == 62.5
    assert [t.day_of_week for t in metrics.upcoming_trainings] == [1]
    assert set(metrics.to_dict()) == {"total_players", "avg_attendance", "trends", "upcoming_trainings"}


def test_dashboard_window_includes_lower_bound(container, tenant_a, make_player, record):
    player = make_player(tenant_a)
    record(30, [(player, True)])
    record(31, [(player, False)])

    metrics = container.analytics_service.get_dashboard_metrics(tenant_a, today=TODAY)

    assert metrics.avg_attendance == 100.0


def test_empty_dashboard(container, tenant_a):
    metrics = container.analytics_service.get_dashboard_metrics(tenant_a, today=TODAY)

    assert metrics.total_players == 0
    assert metrics.avg_attendance == 0
    assert list(metrics.trends) == []


def test_trend_series_uses_ninety_day_window(container, tenant_a, tenant_b, make_player, make_session, record):
    senior = make_player(tenant_a, category="senior")
    cadete = make_player(tenant_a, category="cadete")
    record(5, [(senior, True), (cadete, False)])
    record(20, [(senior, False), (cadete, False)])
    record(120, [(senior, True)])

    other = make_player(tenant_b)
    s_b = make_session(tenant_b, TODAY - timedelta(days=5))
    container.attendance_service.record_attendance(tenant_b, s_b.session_id, other.player_id, True)

    trend = container.analytics_service.get_trend_series(tenant_a, today=TODAY)

    # 20 days ago is 2026-05-26, 5 days ago is 2026-06-10
    assert [(p.category, p.month, p.rate) for p in trend] == [
        ("cadete", "2026-05-01", 0.0),
        ("senior", "2026-05-01", 0.0),
        ("cadete", "2026-06-01", 0.0),
        ("senior", "2026-06-01", 100.0),
    ]

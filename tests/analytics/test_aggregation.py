from __future__ import annotations

from datetime import date

from voley_attendance.analytics.aggregation import (
    build_player_report,
    category_trend,
    format_rate,
    rolling_attendance_average,
)
from voley_attendance.attendance.model import AttendanceReportRow, CategoryAttendanceRow, SessionTally
from voley_attendance.core.enums import Category


def _tally(session_id, present, total):
    return SessionTally(session_id=session_id, session_date=date(2026, 3, session_id), present=present, total=total)


def test_rolling_average_is_mean_of_session_ratios():
    tallies = [_tally(1, 3, 4), _tally(2, 2, 4)]

    assert rolling_attendance_average(tallies) == 62.5


def test_rolling_average_weights_sessions_equally():
    # A global ratio would give 11/12; per-session mean is (1 + 0.5) / 2.
    tallies = [_tally(1, 10, 10), _tally(2, 1, 2)]

    assert rolling_attendance_average(tallies) == 75.0


def test_sessions_without_rows_are_excluded():
    tallies = [_tally(1, 3, 4), _tally(2, 0, 0), _tally(3, 2, 4)]

    assert rolling_attendance_average(tallies) == 62.5


def test_rolling_average_rounds_to_one_decimal():
    assert rolling_attendance_average([_tally(1, 1, 3)]) == 33.3
    assert rolling_attendance_average([_tally(1, 2, 3)]) == 66.7


def test_rolling_average_of_nothing_is_zero():
    assert rolling_attendance_average([]) == 0
    assert rolling_attendance_average([_tally(1, 0, 0)]) == 0


def test_category_trend_groups_by_category_and_month():
    rows = [
        CategoryAttendanceRow(Category.SENIOR, date(2026, 2, 3), True),
        CategoryAttendanceRow(Category.SENIOR, date(2026, 2, 17), False),
        CategoryAttendanceRow(Category.SENIOR, date(2026, 3, 2), True),
        CategoryAttendanceRow(Category.JUVENIL, date(2026, 3, 4), True),
        CategoryAttendanceRow(Category.JUVENIL, date(2026, 3, 9), True),
        CategoryAttendanceRow(Category.JUVENIL, date(2026, 3, 11), False),
        CategoryAttendanceRow(Category.JUVENIL, date(2026, 3, 16), True),
    ]

    trend = [(p.category, p.month, p.rate) for p in category_trend(rows)]

    assert trend == [
        ("senior", "2026-02-01", 50.0),
        ("juvenil", "2026-03-01", 75.0),
        ("senior", "2026-03-01", 100.0),
    ]


def test_category_trend_omits_empty_pairs():
    rows = [CategoryAttendanceRow(Category.CADETE, date(2026, 1, 10), False)]

    trend = category_trend(rows)

    assert [(p.category, p.month, p.rate) for p in trend] == [("cadete", "2026-01-01", 0.0)]
    assert category_trend([]) == []


def _report_row(day, attended, reason=None, player_id=7):
    return AttendanceReportRow(
        player_id=player_id,
        name="Lucía",
        last_name="Pérez",
        category=Category.JUNIOR,
        position="líbero",
        session_date=date(2026, 3, day),
        training_name="Lunes",
        attended=attended,
        absence_reason=reason,
    )


def test_player_report_ten_sessions_seven_attended():
    rows = [_report_row(day, day not in (3, 6, 9), "trabajo" if day == 3 else None) for day in range(1, 11)]

    (report,) = build_player_report(rows)

    assert report.total == 10
    assert report.attended == 7
    assert report.missed == 3
    assert report.attendance_rate == "70.0"
    assert report.absences == [
        {"date": "2026-03-03", "reason": "trabajo"},
        {"date": "2026-03-06", "reason": "Sin motivo"},
        {"date": "2026-03-09", "reason": "Sin motivo"},
    ]


def test_player_report_keeps_row_order_between_players():
    rows = [_report_row(1, True, player_id=2), _report_row(1, False, player_id=1), _report_row(2, True, player_id=2)]

    reports = build_player_report(rows)

    assert [(r.player_id, r.total) for r in reports] == [(2, 2), (1, 1)]


def test_format_rate():
    assert format_rate(0, 0) == "0.0"
    assert format_rate(2, 3) == "66.7"
    assert format_rate(3, 3) == "100.0"

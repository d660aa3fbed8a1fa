from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from voley_attendance.common import datetime_utils
from voley_attendance.common.datetime_utils import optional_iso_date, require_iso_date, today_utc
from voley_attendance.core.exceptions import ValidationError


def test_today_is_the_utc_day(db):
    with db.transaction() as cur:
        before = today_utc()
        cur.execute("SELECT date('now') AS today")
        sqlite_today = cur.fetchone()["today"]
        after = today_utc()

    assert sqlite_today in (before.isoformat(), after.isoformat())


def test_today_utc_asks_for_an_aware_utc_clock(monkeypatch):
    seen = []

    class FixedClock(datetime):
        @classmethod
        def now(cls, tz=None):
            seen.append(tz)
            return datetime(2026, 3, 2, 1, 30, tzinfo=tz)

    monkeypatch.setattr(datetime_utils, "datetime", FixedClock)

    assert today_utc() == date(2026, 3, 2)
    assert seen == [timezone.utc]


def test_iso_dates():
    assert require_iso_date("2026-03-02", "date") == date(2026, 3, 2)
    assert require_iso_date(datetime(2026, 3, 2, 18, 0), "date") == date(2026, 3, 2)
    assert optional_iso_date("", "from") is None
    with pytest.raises(ValidationError, match="from"):
        optional_iso_date("02/03/2026", "from")

"""Aggregation engine.

Pure functions over rows that were already fetched for one tenant. Nothing in
here touches the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceReportRow, CategoryAttendanceRow, SessionTally
from ..core.constants import NO_REASON_PLACEHOLDER


@dataclass(frozen=True)
class TrendPoint:
    category: str
    month: str
    rate: float

    def to_dict(self) -> dict:
        return {"category": self.category, "month": self.month, "rate": self.rate}


@dataclass
class PlayerReport:
    player_id: int
    name: str
    last_name: str
    category: str
    position: Optional[str]
    total: int = 0
    attended: int = 0
    absences: list[dict] = field(default_factory=list)

    @property
    def missed(self) -> int:
        return self.total - self.attended

    @property
    def attendance_rate(self) -> str:
        return format_rate(self.attended, self.total)

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "last_name": self.last_name,
            "category": self.category,
            "position": self.position,
            "total": self.total,
            "attended": self.attended,
            "missed": self.missed,
            "attendance_rate": self.attendance_rate,
            "absences": list(self.absences),
        }


def format_rate(attended: int, total: int) -> str:
    if total <= 0:
        return "0.0"
    return f"{attended * 100 / total:.1f}"


def rolling_attendance_average(tallies: Iterable[SessionTally]) -> float:
    """Mean of per-session present/total ratios, as a percentage.

    Sessions without attendance rows do not count. Every qualifying session
    weighs the same regardless of how many players it had.
    """
    ratios = [t.present / t.total for t in tallies if t.total > 0]
    if not ratios:
        return 0.0
    return round(sum(ratios) / len(ratios) * 100, 1)


def category_trend(rows: Iterable[CategoryAttendanceRow]) -> list[TrendPoint]:
    """Attendance rate per (category, month), oldest month first.

    Months are keyed by their first day. Pairs without rows are not emitted.
    """
    groups: dict[tuple[str, str], list[int]] = {}
    for r in rows:
        month = r.session_date.replace(day=1).isoformat()
        bucket = groups.setdefault((r.category.value, month), [0, 0])
        bucket[1] += 1
        if r.attended:
            bucket[0] += 1

    points = [
        TrendPoint(category=category, month=month, rate=present * 100 / total)
        for (category, month), (present, total) in groups.items()
    ]
    points.sort(key=lambda p: (p.month, p.category))
    return points


def build_player_report(rows: Sequence[AttendanceReportRow]) -> list[PlayerReport]:
    """Group flat report rows by player, keeping the order rows arrive in."""
    by_player: dict[int, PlayerReport] = {}
    for r in rows:
        report = by_player.get(r.player_id)
        if report is None:
            report = PlayerReport(
                player_id=r.player_id,
                name=r.name,
                last_name=r.last_name,
                category=r.category.value,
                position=r.position,
            )
            by_player[r.player_id] = report

        report.total += 1
        if r.attended:
            report.attended += 1
        else:
            report.absences.append(
                {"date": r.session_date.isoformat(), "reason": r.absence_reason or NO_REASON_PLACEHOLDER}
            )
    return list(by_player.values())

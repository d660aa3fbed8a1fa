from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_utc
from ..core.constants import DASHBOARD_WINDOW_DAYS, TREND_WINDOW_DAYS
from ..players.repository import PlayerRepository
from ..trainings.model import TrainingTemplate
from ..trainings.repository import TrainingRepository
from .aggregation import TrendPoint, category_trend, rolling_attendance_average


@dataclass(frozen=True)
class DashboardMetrics:
    total_players: int
    avg_attendance: float
    trends: Sequence[TrendPoint]
    upcoming_trainings: Sequence[TrainingTemplate]

    def to_dict(self) -> dict:
        return {
            "total_players": self.total_players,
            "avg_attendance": self.avg_attendance,
            "trends": [t.to_dict() for t in self.trends],
            "upcoming_trainings": [t.to_dict() for t in self.upcoming_trainings],
        }


class AnalyticsService:
    def __init__(self, players: PlayerRepository, trainings: TrainingRepository, attendance: AttendanceRepository):
        self._players = players
        self._trainings = trainings
        self._attendance = attendance

    def get_dashboard_metrics(self, tenant_id: int, *, today: Optional[date] = None) -> DashboardMetrics:
        today = today or today_utc()
        tenant_id = int(tenant_id)

        tallies = self._attendance.session_tallies(tenant_id, since=today - timedelta(days=DASHBOARD_WINDOW_DAYS))
        return DashboardMetrics(
            total_players=self._players.count_active(tenant_id),
            avg_attendance=rolling_attendance_average(tallies),
            trends=self.get_trend_series(tenant_id, today=today),
            upcoming_trainings=self._trainings.list_owned(tenant_id, active=True),
        )

    def get_trend_series(self, tenant_id: int, *, today: Optional[date] = None) -> list[TrendPoint]:
        today = today or today_utc()
        rows = self._attendance.category_rows(int(tenant_id), since=today - timedelta(days=TREND_WINDOW_DAYS))
        return category_trend(rows)

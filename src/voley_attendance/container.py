from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .analytics.service import AnalyticsService
from .attendance.service import AttendanceService
from .attendance.sqlite_attendance_repository import SQLiteAttendanceRepository
from .database.connection import DatabaseConnection
from .players.service import PlayerService
from .players.sqlite_player_repository import SQLitePlayerRepository
from .reports.export import ExcelReportSink, PdfReportSink, ReportSink
from .reports.service import ReportService
from .sessions.service import SessionService
from .sessions.sqlite_session_repository import SQLiteSessionRepository
from .tenancy.ownership import OwnershipGuard
from .trainings.service import TrainingService
from .trainings.sqlite_training_repository import SQLiteTrainingRepository
from .users.service import AuthService, UserService
from .users.sqlite_user_repository import SQLiteUserRepository


@dataclass(frozen=True)
class Container:
    db: DatabaseConnection

    users_repo: SQLiteUserRepository
    players_repo: SQLitePlayerRepository
    trainings_repo: SQLiteTrainingRepository
    sessions_repo: SQLiteSessionRepository
    attendance_repo: SQLiteAttendanceRepository
    guard: OwnershipGuard

    auth_service: AuthService
    user_service: UserService
    player_service: PlayerService
    training_service: TrainingService
    session_service: SessionService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService
    report_service: ReportService
    report_sinks: Mapping[str, ReportSink]


def build_container(db: DatabaseConnection, *, skip_foreign_players: bool = True) -> Container:
    """Wire repositories and services around one open store handle."""
    users_repo = SQLiteUserRepository(db)
    players_repo = SQLitePlayerRepository(db)
    trainings_repo = SQLiteTrainingRepository(db)
    sessions_repo = SQLiteSessionRepository(db)
    attendance_repo = SQLiteAttendanceRepository(db)
    guard = OwnershipGuard(players_repo, trainings_repo, sessions_repo, attendance_repo)

    return Container(
        db=db,
        users_repo=users_repo,
        players_repo=players_repo,
        trainings_repo=trainings_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        guard=guard,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        player_service=PlayerService(players_repo),
        training_service=TrainingService(trainings_repo),
        session_service=SessionService(sessions_repo, attendance_repo, guard),
        attendance_service=AttendanceService(attendance_repo, guard, skip_foreign_players=skip_foreign_players),
        analytics_service=AnalyticsService(players_repo, trainings_repo, attendance_repo),
        report_service=ReportService(attendance_repo),
        report_sinks={"excel": ExcelReportSink(), "pdf": PdfReportSink()},
    )

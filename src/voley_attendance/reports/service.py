from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..analytics.aggregation import PlayerReport, build_player_report
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import optional_iso_date
from ..common.validators import optional_positive_id, require_category
from ..core.constants import NO_REASON_PLACEHOLDER
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    summary: list[PlayerReport]
    details: list[dict]
    absences: list[dict]
    period: dict = field(default_factory=dict)
    filters: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "summary": [s.to_dict() for s in self.summary],
            "details": list(self.details),
            "absences": list(self.absences),
            "period": dict(self.period),
            "filters": dict(self.filters),
        }


class ReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def get_attendance_report(self, tenant_id: int, filters: Optional[Mapping[str, Any]] = None) -> ReportData:
        """Per-player attendance statistics for the tenant.

        ``filters`` accepts ``from``, ``to``, ``category`` and ``player_id``; all
        optional.
        """
        filters = dict(filters or {})
        start = optional_iso_date(filters.get("from"), "from")
        end = optional_iso_date(filters.get("to"), "to")
        if start and end and start > end:
            raise ValidationError("from must not be after to")
        category = require_category(filters["category"]) if filters.get("category") else None
        player_id = optional_positive_id(filters.get("player_id"), "player_id")

        rows = self._attendance.get_report_rows(
            int(tenant_id),
            date_from=start,
            date_to=end,
            category=category,
            player_id=player_id,
        )

        summary = build_player_report(rows)

        details: list[dict] = []
        absences: list[dict] = []
        for r in rows:
            details.append(
                {
                    "player_id": r.player_id,
                    "name": r.name,
                    "last_name": r.last_name,
                    "category": r.category.value,
                    "position": r.position,
                    "date": r.session_date.isoformat(),
                    "training_name": r.training_name,
                    "attended": r.attended,
                    "absence_reason": r.absence_reason,
                }
            )
            if not r.attended:
                absences.append(
                    {
                        "player_id": r.player_id,
                        "name": r.name,
                        "last_name": r.last_name,
                        "date": r.session_date.isoformat(),
                        "reason": r.absence_reason or NO_REASON_PLACEHOLDER,
                    }
                )

        logger.debug("Attendance report for tenant %s: %s players, %s rows", tenant_id, len(summary), len(rows))
        return ReportData(
            summary=summary,
            details=details,
            absences=absences,
            period={
                "from": start.isoformat() if start else None,
                "to": end.isoformat() if end else None,
            },
            filters={
                "category": category.value if category else None,
                "player_id": player_id,
            },
        )

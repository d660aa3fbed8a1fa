from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_text, require_bool, require_day_of_week, require_hhmm
from ..core.constants import DAYS_OF_WEEK
from ..core.exceptions import NotFoundError
from .model import TrainingTemplate
from .repository import TrainingRepository

logger = logging.getLogger(__name__)


class TrainingService:
    """Use case: manage a tenant's weekly training schedule."""

    def __init__(self, trainings: TrainingRepository):
        self._trainings = trainings

    def _get(self, tenant_id: int, training_id: int) -> TrainingTemplate:
        training = self._trainings.get_owned(int(training_id), int(tenant_id))
        if not training:
            raise NotFoundError("Training not found")
        return training

    def list_trainings(self, tenant_id: int, *, active: Optional[bool] = None) -> Sequence[TrainingTemplate]:
        return self._trainings.list_owned(int(tenant_id), active=active)

    def get_training(self, tenant_id: int, training_id: int) -> TrainingTemplate:
        return self._get(tenant_id, training_id)

    def create_training(
        self,
        tenant_id: int,
        *,
        day_of_week: Any,
        start_time: Any,
        end_time: Any,
        name: Optional[str] = None,
    ) -> TrainingTemplate:
        day = require_day_of_week(day_of_week)
        start = require_hhmm(start_time, "start_time")
        end = require_hhmm(end_time, "end_time")
        name = optional_text(name) or DAYS_OF_WEEK[day]

        training_id = self._trainings.create(
            owner_id=int(tenant_id),
            day_of_week=day,
            start_time=start,
            end_time=end,
            name=name,
        )
        return self._get(tenant_id, training_id)

    def update_training(
        self,
        tenant_id: int,
        training_id: int,
        *,
        day_of_week: Any = None,
        start_time: Any = None,
        end_time: Any = None,
        name: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> TrainingTemplate:
        day = require_day_of_week(day_of_week) if day_of_week is not None else None
        start = require_hhmm(start_time, "start_time") if start_time is not None else None
        end = require_hhmm(end_time, "end_time") if end_time is not None else None
        active = require_bool(active, "active") if active is not None else None

        self._get(tenant_id, training_id)
        self._trainings.update(
            int(training_id),
            int(tenant_id),
            day_of_week=day,
            start_time=start,
            end_time=end,
            name=optional_text(name),
            is_active=active,
        )
        return self._get(tenant_id, training_id)

    def delete_training(self, tenant_id: int, training_id: int) -> None:
        if not self._trainings.delete_detaching_sessions(int(training_id), int(tenant_id)):
            raise NotFoundError("Training not found")
        logger.info("Training %s deleted by tenant %s", training_id, tenant_id)

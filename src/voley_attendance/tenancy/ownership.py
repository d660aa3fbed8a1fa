"""Ownership guard.

Single entry point answering "does this row belong to this tenant?" for every
tenant-scoped entity. A row owned by someone else is reported exactly like a
missing row.
"""
from __future__ import annotations

from typing import Union

from ..attendance.model import AttendanceRecord, ConfirmationRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import EntityKind
from ..core.exceptions import NotFoundError
from ..players.model import Player
from ..players.repository import PlayerRepository
from ..sessions.model import TrainingSession
from ..sessions.repository import SessionRepository
from ..trainings.model import TrainingTemplate
from ..trainings.repository import TrainingRepository

OwnedEntity = Union[Player, TrainingTemplate, TrainingSession, AttendanceRecord, ConfirmationRecord]


class OwnershipGuard:
    def __init__(
        self,
        players: PlayerRepository,
        trainings: TrainingRepository,
        sessions: SessionRepository,
        attendance: AttendanceRepository,
    ):
        self._players = players
        self._trainings = trainings
        self._sessions = sessions
        self._attendance = attendance

    def find_owned(self, kind: EntityKind, entity_id: int, tenant_id: int) -> OwnedEntity:
        kind = EntityKind(kind)
        entity_id = int(entity_id)
        tenant_id = int(tenant_id)

        if kind == EntityKind.PLAYER:
            found = self._players.get_owned(entity_id, tenant_id)
        elif kind == EntityKind.TRAINING:
            found = self._trainings.get_owned(entity_id, tenant_id)
        elif kind == EntityKind.SESSION:
            found = self._sessions.get_owned(entity_id, tenant_id)
        elif kind == EntityKind.ATTENDANCE:
            found = self._attendance.get_by_id(entity_id)
            if found and not self._owns_session_and_player(found.session_id, found.player_id, tenant_id):
                found = None
        else:
            found = self._attendance.get_confirmation_by_id(entity_id)
            if found and not self._owns_session_and_player(found.session_id, found.player_id, tenant_id):
                found = None

        if found is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        return found

    def session(self, session_id: int, tenant_id: int) -> TrainingSession:
        return self.find_owned(EntityKind.SESSION, session_id, tenant_id)

    def player(self, player_id: int, tenant_id: int) -> Player:
        return self.find_owned(EntityKind.PLAYER, player_id, tenant_id)

    def training(self, training_id: int, tenant_id: int) -> TrainingTemplate:
        return self.find_owned(EntityKind.TRAINING, training_id, tenant_id)

    def _owns_session_and_player(self, session_id: int, player_id: int, tenant_id: int) -> bool:
        return (
            self._sessions.get_owned(session_id, tenant_id) is not None
            and self._players.get_owned(player_id, tenant_id) is not None
        )

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import optional_iso_date
from ..common.validators import optional_text, require_bool, require_category, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Player
from .repository import PlayerRepository

logger = logging.getLogger(__name__)


class PlayerService:
    """Use case: manage a tenant's roster."""

    def __init__(self, players: PlayerRepository):
        self._players = players

    def _get(self, tenant_id: int, player_id: int) -> Player:
        player = self._players.get_owned(int(player_id), int(tenant_id))
        if not player:
            raise NotFoundError("Player not found")
        return player

    def list_players(self, tenant_id: int, *, active: Optional[bool] = None, category: Any = None) -> Sequence[Player]:
        category = require_category(category) if category else None
        return self._players.list_owned(int(tenant_id), active=active, category=category)

    def get_player(self, tenant_id: int, player_id: int) -> Player:
        return self._get(tenant_id, player_id)

    def create_player(
        self,
        tenant_id: int,
        *,
        name: str,
        last_name: str,
        category: Any,
        phone: Optional[str] = None,
        position: Optional[str] = None,
        birth_date: Any = None,
    ) -> Player:
        name = require_non_empty(name, "name")
        last_name = require_non_empty(last_name, "last_name")
        category = require_category(category)
        birth = optional_iso_date(birth_date, "birth_date")

        player_id = self._players.create(
            owner_id=int(tenant_id),
            name=name,
            last_name=last_name,
            category=category,
            phone=optional_text(phone),
            position=optional_text(position),
            birth_date=birth,
        )
        return self._get(tenant_id, player_id)

    def update_player(self, tenant_id: int, player_id: int, **changes) -> Player:
        fields: dict[str, Any] = {}
        for key in ("name", "last_name"):
            if changes.get(key) is not None:
                fields[key] = require_non_empty(changes[key], key)
        if changes.get("category") is not None:
            fields["category"] = require_category(changes["category"])
        if changes.get("birth_date") is not None:
            fields["birth_date"] = optional_iso_date(changes["birth_date"], "birth_date")
        for key in ("phone", "position"):
            if changes.get(key) is not None:
                fields[key] = optional_text(changes[key])
        if changes.get("active") is not None:
            require_bool(changes["active"], "active")
        unknown = set(changes) - {"name", "last_name", "category", "birth_date", "phone", "position", "active"}
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        self._get(tenant_id, player_id)
        if fields:
            self._players.update(int(player_id), int(tenant_id), **fields)
        if changes.get("active") is not None:
            self._players.set_active(int(player_id), int(tenant_id), is_active=changes["active"])
        return self._get(tenant_id, player_id)

    def toggle_active(self, tenant_id: int, player_id: int) -> Player:
        player = self._get(tenant_id, player_id)
        self._players.set_active(player.player_id, int(tenant_id), is_active=not player.is_active)
        return self._get(tenant_id, player_id)

    def delete_player(self, tenant_id: int, player_id: int) -> None:
        if not self._players.delete_with_attendance(int(player_id), int(tenant_id)):
            raise NotFoundError("Player not found")
        logger.info("Player %s deleted by tenant %s", player_id, tenant_id)

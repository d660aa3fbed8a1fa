from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_tenant, json_body, pick, query_bool, tenant_required
from ..container import Container

_PLAYER_FIELDS = ("name", "last_name", "category", "phone", "position", "birth_date")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/players", methods=["GET"], endpoint="api_players_list")
    @tenant_required
    def players_list():
        players = container.player_service.list_players(
            current_tenant(),
            active=query_bool("active"),
            category=request.args.get("category"),
        )
        return jsonify([p.to_dict() for p in players])

    @app.route("/api/players/<int:player_id>", methods=["GET"], endpoint="api_players_get")
    @tenant_required
    def players_get(player_id: int):
        return jsonify(container.player_service.get_player(current_tenant(), player_id).to_dict())

    @app.route("/api/players", methods=["POST"], endpoint="api_players_create")
    @tenant_required
    def players_create():
        data = json_body()
        player = container.player_service.create_player(
            current_tenant(),
            name=data.get("name"),
            last_name=data.get("last_name"),
            category=data.get("category"),
            **pick(data, "phone", "position", "birth_date"),
        )
        return jsonify(player.to_dict()), 201

    @app.route("/api/players/<int:player_id>", methods=["PUT"], endpoint="api_players_update")
    @tenant_required
    def players_update(player_id: int):
        data = json_body()
        player = container.player_service.update_player(
            current_tenant(), player_id, **pick(data, *_PLAYER_FIELDS, "active")
        )
        return jsonify(player.to_dict())

    @app.route("/api/players/<int:player_id>/toggle", methods=["PATCH"], endpoint="api_players_toggle")
    @tenant_required
    def players_toggle(player_id: int):
        return jsonify(container.player_service.toggle_active(current_tenant(), player_id).to_dict())

    @app.route("/api/players/<int:player_id>", methods=["DELETE"], endpoint="api_players_delete")
    @tenant_required
    def players_delete(player_id: int):
        container.player_service.delete_player(current_tenant(), player_id)
        return jsonify({"message": "Player deleted"})

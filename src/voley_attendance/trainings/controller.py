from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_tenant, json_body, pick, query_bool, tenant_required
from ..container import Container

_TRAINING_FIELDS = ("day_of_week", "start_time", "end_time", "name")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/trainings", methods=["GET"], endpoint="api_trainings_list")
    @tenant_required
    def trainings_list():
        trainings = container.training_service.list_trainings(current_tenant(), active=query_bool("active"))
        return jsonify([t.to_dict() for t in trainings])

    @app.route("/api/trainings/<int:training_id>", methods=["GET"], endpoint="api_trainings_get")
    @tenant_required
    def trainings_get(training_id: int):
        return jsonify(container.training_service.get_training(current_tenant(), training_id).to_dict())

    @app.route("/api/trainings", methods=["POST"], endpoint="api_trainings_create")
    @tenant_required
    def trainings_create():
        data = json_body()
        training = container.training_service.create_training(
            current_tenant(),
            day_of_week=data.get("day_of_week"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            name=data.get("name"),
        )
        return jsonify(training.to_dict()), 201

    @app.route("/api/trainings/<int:training_id>", methods=["PUT"], endpoint="api_trainings_update")
    @tenant_required
    def trainings_update(training_id: int):
        data = json_body()
        training = container.training_service.update_training(
            current_tenant(), training_id, **pick(data, *_TRAINING_FIELDS, "active")
        )
        return jsonify(training.to_dict())

    @app.route("/api/trainings/<int:training_id>", methods=["DELETE"], endpoint="api_trainings_delete")
    @tenant_required
    def trainings_delete(training_id: int):
        container.training_service.delete_training(current_tenant(), training_id)
        return jsonify({"message": "Training deleted"})

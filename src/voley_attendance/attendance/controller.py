from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_tenant, json_body, tenant_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/sessions", methods=["GET"], endpoint="api_sessions_list")
    @tenant_required
    def sessions_list():
        sessions = container.session_service.list_sessions(
            current_tenant(),
            date_from=request.args.get("from"),
            date_to=request.args.get("to"),
            training_id=request.args.get("training_id"),
        )
        return jsonify([s.to_dict() for s in sessions])

    @app.route("/api/attendance/sessions", methods=["POST"], endpoint="api_sessions_resolve")
    @tenant_required
    def sessions_resolve():
        data = json_body()
        session_row = container.session_service.resolve_session(
            current_tenant(),
            data.get("date"),
            training_id=data.get("training_id"),
            notes=data.get("notes"),
        )
        return jsonify(session_row.to_dict())

    @app.route("/api/attendance/sessions/<int:session_id>", methods=["GET"], endpoint="api_sessions_detail")
    @tenant_required
    def sessions_detail(session_id: int):
        detail = container.session_service.get_session_detail(session_id, current_tenant())
        return jsonify(detail.to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_record")
    @tenant_required
    def attendance_record():
        data = json_body()
        record = container.attendance_service.record_attendance(
            current_tenant(),
            data.get("session_id"),
            data.get("player_id"),
            data.get("attended"),
            data.get("absence_reason"),
        )
        return jsonify(
            {
                "id": record.record_id,
                "session_id": record.session_id,
                "player_id": record.player_id,
                "attended": record.attended,
                "absence_reason": record.absence_reason,
            }
        )

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="api_attendance_bulk")
    @tenant_required
    def attendance_bulk():
        data = json_body()
        result = container.attendance_service.record_attendance_bulk(
            current_tenant(),
            data.get("session_id"),
            data.get("attendance"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/attendance/<int:record_id>", methods=["PUT"], endpoint="api_attendance_update")
    @tenant_required
    def attendance_update(record_id: int):
        data = json_body()
        record = container.attendance_service.update_record(
            current_tenant(),
            record_id,
            attended=data.get("attended"),
            reason=data.get("absence_reason"),
        )
        return jsonify(
            {
                "id": record.record_id,
                "session_id": record.session_id,
                "player_id": record.player_id,
                "attended": record.attended,
                "absence_reason": record.absence_reason,
            }
        )

    @app.route("/api/attendance/<int:record_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    @tenant_required
    def attendance_delete(record_id: int):
        container.attendance_service.delete_record(current_tenant(), record_id)
        return jsonify({"message": "Attendance deleted"})

    @app.route("/api/attendance/player/<int:player_id>/stats", methods=["GET"], endpoint="api_attendance_player_stats")
    @tenant_required
    def attendance_player_stats(player_id: int):
        stats = container.attendance_service.get_player_stats(
            current_tenant(),
            player_id,
            date_from=request.args.get("from"),
            date_to=request.args.get("to"),
        )
        return jsonify(stats.to_dict())

    @app.route("/api/attendance/confirmations", methods=["POST"], endpoint="api_confirmations_set")
    @tenant_required
    def confirmations_set():
        data = json_body()
        confirmation = container.attendance_service.set_confirmation(
            current_tenant(),
            data.get("session_id"),
            data.get("player_id"),
            data.get("status"),
            data.get("notes"),
        )
        return jsonify(confirmation.to_dict())

    @app.route(
        "/api/attendance/sessions/<int:session_id>/confirmations",
        methods=["GET"],
        endpoint="api_confirmations_list",
    )
    @tenant_required
    def confirmations_list(session_id: int):
        confirmations = container.attendance_service.list_confirmations(current_tenant(), session_id)
        return jsonify([c.to_dict() for c in confirmations])

from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import today_utc
from ..common.web import current_tenant, tenant_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_reports_attendance")
    @tenant_required
    def reports_attendance():
        filters = {k: request.args.get(k) for k in ("from", "to", "category", "player_id")}
        report = container.report_service.get_attendance_report(current_tenant(), filters)

        fmt = (request.args.get("format") or "json").lower()
        if fmt == "json":
            return jsonify(report.to_dict())
        sink = container.report_sinks.get(fmt)
        if sink is None:
            raise ValidationError("format must be json, excel or pdf")

        output = io.BytesIO(sink.render(report))
        return send_file(
            output,
            mimetype=sink.mimetype,
            as_attachment=True,
            download_name=f"asistencia_{today_utc().isoformat()}.{sink.extension}",
        )

from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_tenant, tenant_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/analytics/dashboard", methods=["GET"], endpoint="api_analytics_dashboard")
    @tenant_required
    def analytics_dashboard():
        return jsonify(container.analytics_service.get_dashboard_metrics(current_tenant()).to_dict())

    @app.route("/api/analytics/trends", methods=["GET"], endpoint="api_analytics_trends")
    @tenant_required
    def analytics_trends():
        trends = container.analytics_service.get_trend_series(current_tenant())
        return jsonify([t.to_dict() for t in trends])

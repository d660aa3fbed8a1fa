from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import admin_required, current_role, current_tenant, json_body, pick, tenant_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["role"] = user.role.value
        return jsonify(
            {"user": {"id": user.user_id, "email": user.email, "name": user.name, "role": user.role.value}}
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @tenant_required
    def me():
        user = container.users_repo.get_by_id(current_tenant())
        if user is None:
            session.clear()
            return jsonify({"error": "Authentication required"}), 401
        return jsonify({"user": user.public_view()})

    @app.route("/api/auth/change-password", methods=["PUT"], endpoint="api_change_password")
    @tenant_required
    def change_password():
        data = json_body()
        container.user_service.change_password(
            current_tenant(), data.get("current_password"), data.get("new_password")
        )
        return jsonify({"message": "Password updated"})

    @app.route("/api/users", methods=["GET"], endpoint="api_users_list")
    @admin_required
    def users_list():
        users = container.user_service.list_users(current_role=current_role())
        return jsonify([u.public_view() for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @admin_required
    def users_create():
        data = json_body()
        user = container.user_service.create_user(
            current_role=current_role(),
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role", "user"),
        )
        return jsonify(user.public_view()), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="api_users_update")
    @admin_required
    def users_update(user_id: int):
        data = json_body()
        changes = pick(data, "email", "password", "name", "role")
        if "active" in data:
            changes["is_active"] = data["active"]
        user = container.user_service.update_user(current_role=current_role(), user_id=user_id, **changes)
        return jsonify(user.public_view())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_users_delete")
    @admin_required
    def users_delete(user_id: int):
        container.user_service.delete_user(
            current_role=current_role(),
            current_user_id=current_tenant(),
            user_id=user_id,
        )
        return jsonify({"message": "User deleted"})

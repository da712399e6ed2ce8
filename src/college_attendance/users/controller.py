from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.exceptions import AuthenticationError
from .auth import HEAD_OR_ADMIN, bearer_token, roles_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        issued = container.auth_service.authenticate(data.get("login") or "", data.get("password") or "")
        user = issued.user
        return jsonify(
            {
                "token": issued.token,
                "user": {
                    "id": user.user_id,
                    "login": user.login,
                    "role": user.role.value,
                    "fullName": user.full_name or "Администратор",
                },
            }
        )

    @app.route("/api/auth/verify", methods=["POST"], endpoint="auth_verify")
    def auth_verify():
        try:
            user = container.auth_service.verify_token(bearer_token())
        except AuthenticationError as e:
            return jsonify({"valid": False, "error": str(e)}), 401

        return jsonify(
            {
                "valid": True,
                "user": {
                    "id": user.user_id,
                    "login": user.login,
                    "role": user.role.value,
                    "fullName": user.full_name or "Администратор",
                },
            }
        )

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_users():
        return jsonify([u.to_dict() for u in container.user_service.list_users()])

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_users_create")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_users_create():
        data = json_body()
        user = container.user_service.create(
            login=data.get("login") or "",
            password=data.get("password") or "",
            role=data.get("role") or "",
            full_name=data.get("fullName"),
        )
        return jsonify(user.to_dict()), 201

    @app.route("/api/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_users_get")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_users_get(user_id: int):
        return jsonify(container.user_service.get(user_id).to_dict())

    @app.route("/api/admin/users/<int:user_id>", methods=["PUT", "PATCH"], endpoint="admin_users_update")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_users_update(user_id: int):
        user = container.user_service.update(user_id, json_body(), partial=request.method == "PATCH")
        return jsonify(user.to_dict())

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_users_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_users_delete(user_id: int):
        container.user_service.delete(user_id)
        return jsonify({"message": "Пользователь удалён"})

    @app.route("/api/users", methods=["GET"], endpoint="users_by_role")
    @roles_required(*HEAD_OR_ADMIN)
    def users_by_role():
        users = container.user_service.list_users(role=request.args.get("role"))
        return jsonify([{"id": u.user_id, "fullName": u.full_name, "login": u.login, "role": u.role.value} for u in users])

    @app.route("/api/admin/curators", methods=["GET"], endpoint="admin_curators")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_curators():
        curators = container.user_service.list_curators()
        return jsonify([{"id": u.user_id, "fullName": u.full_name, "role": u.role.value} for u in curators])

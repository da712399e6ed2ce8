from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @token_required
    def holidays_list():
        return jsonify([h.to_dict() for h in container.holiday_service.list()])

    @app.route("/api/holidays/<int:holiday_id>", methods=["GET"], endpoint="holidays_get")
    @token_required
    def holidays_get(holiday_id: int):
        return jsonify(container.holiday_service.get(holiday_id).to_dict())

    @app.route("/api/admin/holidays", methods=["POST"], endpoint="holidays_create")
    @roles_required(*HEAD_OR_ADMIN)
    def holidays_create():
        return jsonify(container.holiday_service.create(json_body()).to_dict()), 201

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["PUT", "PATCH"], endpoint="holidays_update")
    @roles_required(*HEAD_OR_ADMIN)
    def holidays_update(holiday_id: int):
        holiday = container.holiday_service.update(holiday_id, json_body(), partial=request.method == "PATCH")
        return jsonify(holiday.to_dict())

    @app.route("/api/admin/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def holidays_delete(holiday_id: int):
        container.holiday_service.delete(holiday_id)
        return jsonify({"message": "Праздник удалён"})

from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import today_local
from ..common.http import json_body
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    def _today():
        return today_local(container.timezone)

    @app.route("/api/groups", methods=["GET"], endpoint="groups_list")
    @token_required
    def groups_list():
        today = _today()
        return jsonify([g.to_dict(today) for g in container.group_service.list()])

    @app.route("/api/groups/<int:group_id>", methods=["GET"], endpoint="groups_get")
    @token_required
    def groups_get(group_id: int):
        return jsonify(container.group_service.get(group_id).to_dict(_today()))

    @app.route("/api/admin/groups", methods=["POST"], endpoint="groups_create")
    @roles_required(*HEAD_OR_ADMIN)
    def groups_create():
        return jsonify(container.group_service.create(json_body()).to_dict(_today())), 201

    @app.route("/api/admin/groups/<int:group_id>", methods=["PUT", "PATCH"], endpoint="groups_update")
    @roles_required(*HEAD_OR_ADMIN)
    def groups_update(group_id: int):
        return jsonify(container.group_service.update(group_id, json_body()).to_dict(_today()))

    @app.route("/api/admin/groups/<int:group_id>", methods=["DELETE"], endpoint="groups_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def groups_delete(group_id: int):
        container.group_service.delete(group_id)
        return jsonify({"message": "Группа удалена"})

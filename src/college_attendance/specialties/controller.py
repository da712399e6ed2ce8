from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/specialties", methods=["GET"], endpoint="specialties_list")
    @token_required
    def specialties_list():
        return jsonify([s.to_dict() for s in container.specialty_service.list()])

    @app.route("/api/admin/specialties", methods=["POST"], endpoint="specialties_create")
    @roles_required(*HEAD_OR_ADMIN)
    def specialties_create():
        data = json_body()
        specialty = container.specialty_service.create(
            code=data.get("code") or "",
            name=data.get("name") or "",
            duration_years=data.get("durationYears", 4),
        )
        return jsonify(specialty.to_dict()), 201

    @app.route("/api/admin/specialties/<int:specialty_id>", methods=["PATCH"], endpoint="specialties_update")
    @roles_required(*HEAD_OR_ADMIN)
    def specialties_update(specialty_id: int):
        return jsonify(container.specialty_service.update(specialty_id, json_body()).to_dict())

    @app.route("/api/admin/specialties/<int:specialty_id>", methods=["DELETE"], endpoint="specialties_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def specialties_delete(specialty_id: int):
        container.specialty_service.delete(specialty_id)
        return jsonify({"message": "Специальность удалена"})

from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, query_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.auth import HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @token_required
    def students_list():
        students = container.student_service.list(group_id=query_int("groupId"))
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @token_required
    def students_get(student_id: int):
        return jsonify(container.student_service.get(student_id).to_dict())

    @app.route("/api/admin/students", methods=["POST"], endpoint="students_create")
    @roles_required(*HEAD_OR_ADMIN)
    def students_create():
        return jsonify(container.student_service.create(json_body()).to_dict()), 201

    @app.route("/api/admin/students/<int:student_id>", methods=["PATCH"], endpoint="students_update")
    @roles_required(*HEAD_OR_ADMIN)
    def students_update(student_id: int):
        return jsonify(container.student_service.update(student_id, json_body()).to_dict())

    @app.route("/api/admin/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def students_delete(student_id: int):
        container.student_service.delete(student_id)
        return jsonify({"message": "Студент удалён"})

    @app.route("/api/admin/import/students", methods=["POST"], endpoint="students_import")
    @roles_required(*HEAD_OR_ADMIN)
    def students_import():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("Файл не загружен")

        result = container.student_importer.import_file(upload.read())
        if result.errors:
            return jsonify({**result.to_dict(), "message": "Импорт с ошибками", "summary": result.message}), 207
        return jsonify({**result.to_dict(), "message": f"Успешно импортировано: {result.imported_count} студентов"})

from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import today_local
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/finish-year", methods=["POST"], endpoint="admin_finish_year")
    @roles_required(*HEAD_OR_ADMIN)
    def admin_finish_year():
        result = container.academic_year_service.finish_year(today_local(container.timezone))
        return jsonify(result.to_dict())

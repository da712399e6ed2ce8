from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..core.enums import Role
from ..users.auth import TEACHER_OR_ABOVE, current_user, roles_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/qr/refresh/<int:lesson_id>", methods=["GET"], endpoint="qr_refresh")
    @roles_required(*TEACHER_OR_ABOVE)
    def qr_refresh(lesson_id: int):
        issued = container.qr_service.generate_token(current_user().user_id, lesson_id)
        return jsonify(
            {
                "token": issued.token,
                "expiresAt": issued.expires_at.isoformat(),
                "qr": container.qr_service.qr_data_url(issued.token),
            }
        )

    @app.route("/api/attendance/qr/verify", methods=["POST"], endpoint="qr_verify")
    @roles_required(Role.STUDENT)
    def qr_verify():
        container.qr_service.require_valid(json_body().get("token"))
        record = container.attendance_service.mark_present_via_qr(current_user())
        return jsonify({"success": True, "message": "Вы успешно отмечены!", "attendance": record.to_dict()})

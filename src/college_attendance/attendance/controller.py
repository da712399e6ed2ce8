from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_range_type, parse_request_date
from ..common.http import json_body, query_int
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, TEACHER_OR_ABOVE, current_user, roles_required, token_required
from .model import AttendanceFilter


def _filter_from_query() -> AttendanceFilter:
    """groupId/studentId plus either ``date`` or a ``startDate``/``endDate`` window."""
    args = request.args
    if args.get("date"):
        day = parse_request_date(args["date"], "date")
        start = end = day
    else:
        start = parse_request_date(args["startDate"], "startDate") if args.get("startDate") else None
        end = parse_request_date(args["endDate"], "endDate") if args.get("endDate") else None
    return AttendanceFilter(group_id=query_int("groupId"), student_id=query_int("studentId"), start=start, end=end)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @token_required
    def attendance_list():
        return jsonify([r.to_dict() for r in container.attendance_service.list(_filter_from_query())])

    @app.route("/api/attendance/log", methods=["GET"], endpoint="attendance_log")
    @token_required
    def attendance_log():
        return jsonify([r.to_dict() for r in container.attendance_service.log(_filter_from_query())])

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    @token_required
    def attendance_get(attendance_id: int):
        return jsonify(container.attendance_service.get(attendance_id).to_dict())

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @roles_required(*TEACHER_OR_ABOVE)
    def attendance_mark():
        record, created = container.attendance_service.mark(json_body(), updated_by_id=current_user().user_id)
        return jsonify(record.to_dict()), 201 if created else 200

    @app.route("/api/attendance/batch", methods=["POST"], endpoint="attendance_batch")
    @roles_required(*TEACHER_OR_ABOVE)
    def attendance_batch():
        result = container.attendance_service.mark_batch(
            json_body().get("records"), updated_by_id=current_user().user_id
        )
        return jsonify(result.to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @roles_required(*TEACHER_OR_ABOVE)
    def attendance_update(attendance_id: int):
        record = container.attendance_service.update(attendance_id, json_body(), updated_by_id=current_user().user_id)
        return jsonify(record.to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="attendance_patch")
    @roles_required(*TEACHER_OR_ABOVE)
    def attendance_patch(attendance_id: int):
        record = container.attendance_service.patch(attendance_id, json_body(), updated_by_id=current_user().user_id)
        return jsonify(record.to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @roles_required(*TEACHER_OR_ABOVE)
    def attendance_delete(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return jsonify({"message": "Запись посещаемости удалена"})

    @app.route("/api/attendance/stats/summary", methods=["GET"], endpoint="attendance_summary")
    @roles_required(*HEAD_OR_ADMIN)
    def attendance_summary():
        summary = container.attendance_service.group_summary(
            parse_range_type(request.args.get("type")),
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return jsonify(summary)

    @app.route("/api/attendance/student/<int:student_id>/percent", methods=["GET"], endpoint="attendance_student_percent")
    @token_required
    def attendance_student_percent(student_id: int):
        stats = container.attendance_service.student_percent(
            student_id,
            parse_range_type(request.args.get("type")),
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return jsonify(stats)

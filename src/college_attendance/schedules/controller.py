from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import today_local
from ..common.http import json_body, query_int
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    # Group start times
    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    @token_required
    def schedules_list():
        schedules = container.schedule_service.list(group_id=query_int("groupId"))
        return jsonify([s.to_dict() for s in schedules])

    @app.route("/api/schedules/<int:schedule_id>", methods=["GET"], endpoint="schedules_get")
    @token_required
    def schedules_get(schedule_id: int):
        return jsonify(container.schedule_service.get(schedule_id).to_dict())

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    @roles_required(*HEAD_OR_ADMIN)
    def schedules_create():
        return jsonify(container.schedule_service.create(json_body()).to_dict()), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT", "PATCH"], endpoint="schedules_update")
    @roles_required(*HEAD_OR_ADMIN)
    def schedules_update(schedule_id: int):
        return jsonify(container.schedule_service.update(schedule_id, json_body()).to_dict())

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @roles_required(*HEAD_OR_ADMIN)
    def schedules_delete(schedule_id: int):
        container.schedule_service.delete(schedule_id)
        return jsonify({"message": "Расписание удалено"})

    # Bell schedule
    @app.route("/api/schedule", methods=["GET"], endpoint="bell_schedule")
    @token_required
    def bell_schedule():
        return jsonify([s.to_dict() for s in container.bell_schedule_service.list()])

    @app.route("/api/schedule/today", methods=["GET"], endpoint="bell_schedule_today")
    @token_required
    def bell_schedule_today():
        slots = container.bell_schedule_service.for_day(today_local(container.timezone))
        return jsonify([s.to_dict() for s in slots])

    @app.route("/api/schedule", methods=["PUT"], endpoint="bell_schedule_save")
    @roles_required(*HEAD_OR_ADMIN)
    def bell_schedule_save():
        return jsonify({"updated": container.bell_schedule_service.save(json_body().get("items"))})

    @app.route("/api/schedule/seed-defaults", methods=["POST"], endpoint="bell_schedule_seed")
    @roles_required(*HEAD_OR_ADMIN)
    def bell_schedule_seed():
        return jsonify({"updated": container.bell_schedule_service.seed_defaults()})

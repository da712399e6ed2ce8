from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_request_date, today_local
from ..common.http import json_body, query_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.auth import ADMIN_ONLY, HEAD_OR_ADMIN, roles_required, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/practice-days/batch", methods=["POST"], endpoint="practice_batch")
    @roles_required(*ADMIN_ONLY)
    def practice_batch():
        data = json_body()
        if not data.get("groupId") or not data.get("startDate") or not data.get("endDate"):
            raise ValidationError("groupId, startDate и endDate обязательны")

        count = container.practice_service.add_range(
            data["groupId"],
            parse_request_date(data["startDate"], "startDate"),
            parse_request_date(data["endDate"], "endDate"),
            data.get("name"),
        )
        return jsonify({"message": f"Добавлено {count} дней практики", "count": count})

    @app.route("/api/practice-days/check", methods=["GET"], endpoint="practice_check")
    @token_required
    def practice_check():
        group_id = query_int("groupId")
        if group_id is None or not request.args.get("date"):
            raise ValidationError("groupId и date обязательны")

        is_practice, name = container.practice_service.check(group_id, parse_request_date(request.args["date"], "date"))
        return jsonify({"isPractice": is_practice, "name": name})

    @app.route("/api/practice-days/today", methods=["GET"], endpoint="practice_today")
    @roles_required(*HEAD_OR_ADMIN)
    def practice_today():
        group_ids = container.practice_service.groups_on(today_local(container.timezone))
        return jsonify([{"groupId": gid} for gid in group_ids])

    @app.route("/api/practice-days/range", methods=["GET"], endpoint="practice_range")
    @roles_required(*HEAD_OR_ADMIN)
    def practice_range():
        if not request.args.get("start") or not request.args.get("end"):
            raise ValidationError("start и end обязательны")

        group_ids = container.practice_service.groups_in_range(
            parse_request_date(request.args["start"], "start"),
            parse_request_date(request.args["end"], "end"),
        )
        return jsonify([{"groupId": gid} for gid in group_ids])

from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.datetime_utils import parse_range_type
from ..common.validators import require_int
from ..container import Container
from ..users.auth import HEAD_OR_ADMIN, roles_required
from .export import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    @app.route("/api/export/attendance", methods=["GET"], endpoint="export_attendance")
    @roles_required(*HEAD_OR_ADMIN)
    def export_attendance():
        raw = request.args.get("groupIds") or ""
        group_ids = [require_int(g, "groupIds") for g in raw.split(",") if g.strip()]

        data = container.export_service.build_bytes(
            group_ids,
            parse_range_type(request.args.get("dateRangeType") or request.args.get("type")),
            start=request.args.get("startDate") or request.args.get("start"),
            end=request.args.get("endDate") or request.args.get("end"),
        )
        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=container.export_service.filename(),
        )

"""Flask plumbing shared by all controllers: container access, JSON input, errors."""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CONTAINER_KEY = "college_attendance"

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ValidationError, 400),
)


def current_container():
    return current_app.extensions[CONTAINER_KEY]


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Ожидается JSON-объект в теле запроса")
    return data


def query_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} должен быть числом")


def status_for(error: DomainError) -> int:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return code
    return 400


def error_response(message: str, status: int, **extra: Any):
    return jsonify({"error": message, **extra}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        code = status_for(e)
        logger.info("%s %s -> %s: %s", request.method, request.path, code, e)
        return error_response(str(e), code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return error_response("Ошибка сервера", 500, detail=str(e))
        return error_response("Ошибка сервера", 500)


def register_request_logging(app: Flask, *, cors_origins: str = "") -> None:
    origins = {o.strip() for o in cors_origins.split(",") if o.strip()}

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_and_cors(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, "%s %s %s %.0fms", request.method, request.path, response.status_code, elapsed_ms)

        origin = request.headers.get("Origin")
        if origin and ("*" in origins or origin in origins):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        return response

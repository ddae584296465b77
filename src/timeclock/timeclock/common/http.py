from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

log = logging.getLogger(__name__)


def fail(message: str, status: int = 400):
    return jsonify({"error": message}), status


def json_body() -> dict:
    """Request JSON as a dict; a missing or malformed body reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), status=e.status_code)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("システムエラーが発生しました", status=500)

# Overview: Uniform {status, message, data} response envelope and error handlers.

from __future__ import annotations

from typing import Any

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .errors import BookstoreError


def success(data: Any = None, message: str = "OK", status_code: int = 200):
    return jsonify({"status": "success", "message": message, "data": data}), status_code


def error(message: str, status_code: int = 400, data: Any = None):
    return jsonify({"status": "error", "message": message, "data": data}), status_code


def register_error_handlers(app: Flask) -> None:
    """Render every failure, expected or not, as an error envelope."""

    @app.errorhandler(BookstoreError)
    def handle_bookstore_error(exc: BookstoreError):
        return error(exc.message, exc.status_code, exc.details)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return error(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        current_app.logger.exception("Unhandled error")
        return error("Internal server error", 500)

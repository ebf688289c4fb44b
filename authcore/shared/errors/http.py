# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from authcore.shared.logging import logger

from .base import AppError

INTERNAL_ERROR_BODY = {"error": "internal_error"}


def _where() -> str:
    return f"{request.method} {request.path}"


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def handle_http_exception(error: HTTPException) -> tuple[Response, int] | HTTPException:
    if error.code is not None and error.code < 400:
        return error
    # werkzeug's 404/405/413 etc. as JSON, e.g. {"error": "method_not_allowed"}
    name = (error.name or "http_error").lower().replace(" ", "_")
    return jsonify({"error": name}), error.code or HTTPStatus.INTERNAL_SERVER_ERROR


def register_error_handler(app: Flask, *, debug: bool = False) -> None:
    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        if exc.is_internal:
            detail = getattr(exc, "detail", None)
            logger.error(
                f"errors.internal: code={exc.code} type={type(exc).__name__} on {_where()}"
                + (f" ({detail})" if detail else "")
            )
        else:
            logger.debug(f"errors.client: code={exc.code} on {_where()}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return handle_http_exception(exc)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        if debug:
            logger.exception(f"errors.unhandled: {type(exc).__name__} on {_where()}")
        else:
            logger.error(f"errors.unhandled: {type(exc).__name__} on {_where()}")
        return jsonify(INTERNAL_ERROR_BODY), HTTPStatus.INTERNAL_SERVER_ERROR


__all__ = ["INTERNAL_ERROR_BODY", "handle_app_error", "handle_http_exception",
           "register_error_handler"]

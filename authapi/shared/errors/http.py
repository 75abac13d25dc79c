# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound

from authapi.shared.config import load_config
from authapi.shared.logging import logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _http_exception_as_error(exc: HTTPException) -> AppError:
    status = HTTPStatus(exc.code or HTTPStatus.INTERNAL_SERVER_ERROR)
    if isinstance(exc, NotFound):
        message = f"Route {request.path} not found"
    else:
        message = status.phrase
    return AppError(
        code=status.phrase.lower().replace(" ", "_"),
        status=status,
        message=message,
    )


def register_error_handler(app: Flask) -> None:
    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.is_client_error:
            logger.info(f"http.fail: {exc.code} on {request.method} {request.path}")
        else:
            logger.error(f"http.error: {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return handle_app_error(_http_exception_as_error(exc))

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        where = f"{request.method} {request.path}"
        if debug_mode:
            logger.exception(
                f"http.unhandled: {where} user={getattr(g, 'user_id', None)} "
                f"query={dict(request.args)}"
            )
        else:
            logger.error(f"http.unhandled: {type(exc).__name__} on {where}")
        return handle_app_error(InfrastructureError())


__all__ = ["handle_app_error", "register_error_handler"]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping
from typing import Any

from flask import Flask, Response, g, request

from authapi.shared.config import load_config
from authapi.shared.logging import (clear_correlation_id, get_correlation_id,
                                    logger, set_correlation_id)

REQUEST_ID_HEADER = "X-Request-ID"

# Values are replaced by a short digest so two requests can still be correlated.
_HASHED_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})
_REDACTED_PARAMS = ("password", "token", "key", "secret")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _digest(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _digest(value) if key.lower() in _HASHED_HEADERS else value
        for key, value in headers.items()
    }


def _safe_params(params: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "<redacted>" if any(word in key.lower() for word in _REDACTED_PARAMS) else value
        for key, value in params.items()
    }


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _open_request() -> None:
        set_correlation_id(request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8))
        g.request_started = time.perf_counter()

        if verbose:
            logger.debug(
                f"http.request: {request.method} {request.path} from {_client_ip()} "
                f"query={_safe_params(request.args)} headers={_safe_headers(request.headers)} "
                f"body_size={request.content_length or 0}"
            )

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        logger.info(
            f"http.response: {request.method} {request.path} -> {response.status_code} "
            f"in {elapsed_ms:.1f} ms"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http.error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]

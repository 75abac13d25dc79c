# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify

from authapi.domain.sessions.repositories import SessionCache
from authapi.infrastructure.health import check_database, check_session_cache
from authapi.shared.logging import logger


class MiscController:
    def __init__(self, *, cache: SessionCache) -> None:
        self._cache = cache

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/healthchecker", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"status": "success"}
        try:
            check_database()
            status["database"] = "ok"
        except Exception as exc:  # pragma: no cover
            logger.error(f"health: database check failed ({type(exc).__name__})")
            status["status"] = "error"
            status["database"] = "unavailable"
        try:
            status["cache"] = "ok" if check_session_cache(self._cache) else "degraded"
        except Exception as exc:  # pragma: no cover
            logger.error(f"health: cache check failed ({type(exc).__name__})")
            status["status"] = "error"
            status["cache"] = "unavailable"
        code = HTTPStatus.OK if status["status"] == "success" else HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(status), code

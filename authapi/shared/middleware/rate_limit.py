# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client throttling for the credential endpoints (register, login)."""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from threading import Lock

from flask import jsonify, request

from authapi.shared.config import load_config
from authapi.shared.logging import logger


class InMemoryRateLimiter:
    """Sliding window: at most ``limit`` hits per ``window_seconds`` per key."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._hits: dict[str, deque[float]] = {}

    def hit(self, key: str) -> float:
        """Record a hit; return 0 when allowed, else seconds until the next slot frees up."""
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self._window:
                hits.popleft()
            if len(hits) >= self._limit:
                return self._window - (now - hits[0])
            hits.append(now)
            return 0.0


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or request.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    security = load_config().security
    limiter = InMemoryRateLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def wrapper(*args, **kwargs):
            retry_after = limiter.hit(f"{request.path}:{_client_ip()}")
            if retry_after:
                logger.warning(f"rate_limit: rejected {request.method} {request.path}")
                response = jsonify(
                    {
                        "status": "fail",
                        "error": "rate_limited",
                        "message": "Too many requests, try again later",
                    }
                )
                response.headers["Retry-After"] = str(math.ceil(retry_after))
                return response, HTTPStatus.TOO_MANY_REQUESTS
            return view(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]

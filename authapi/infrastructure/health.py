# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import text

from authapi.domain.sessions.repositories import SessionCache
from authapi.infrastructure.db import ENGINE

_PROBE_KEY = "healthchecker:probe"


def check_database() -> bool:
    with ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))
    return True


def check_session_cache(cache: SessionCache) -> bool:
    cache.set(_PROBE_KEY, "ok", 5)
    return cache.get(_PROBE_KEY) == "ok"


__all__ = ["check_database", "check_session_cache"]

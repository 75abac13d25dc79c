# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from authapi.domain.sessions.repositories import SessionCache
from authapi.shared.logging import logger


@dataclass(slots=True)
class CacheEntry:
    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemorySessionCache(SessionCache):
    """Process-local TTL store for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = Lock()
        self._store: dict[str, CacheEntry] = {}

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)
        logger.debug(f"cache: set key={key} ttl={ttl_seconds}s")

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                logger.debug(f"cache: miss key={key}")
                return None
            if entry.is_expired(self._clock()):
                logger.debug(f"cache: expired key={key}")
                self._store.pop(key, None)
                return None
        logger.debug(f"cache: hit key={key}")
        return entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            if self._store.pop(key, None) is not None:
                logger.debug(f"cache: invalidate key={key}")

    def clear(self) -> None:
        with self._lock:
            logger.debug("cache: clear all keys")
            self._store.clear()


__all__ = ["InMemorySessionCache"]

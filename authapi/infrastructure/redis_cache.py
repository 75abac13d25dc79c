# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from redis import Redis
from redis.exceptions import RedisError

from authapi.domain.sessions.repositories import SessionCache
from authapi.shared.errors.base import InfrastructureError
from authapi.shared.logging import logger


class RedisSessionCache(SessionCache):
    """Session records in Redis; expiry is left to Redis' own eviction."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisSessionCache:
        return cls(Redis.from_url(url, decode_responses=True))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            logger.error(f"cache.redis: set failed ({type(exc).__name__})")
            raise InfrastructureError() from exc

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except RedisError as exc:
            logger.error(f"cache.redis: get failed ({type(exc).__name__})")
            raise InfrastructureError() from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except RedisError as exc:
            logger.error(f"cache.redis: delete failed ({type(exc).__name__})")
            raise InfrastructureError() from exc


__all__ = ["RedisSessionCache"]

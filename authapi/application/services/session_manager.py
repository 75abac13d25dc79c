# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Authentication session lifecycle.

A session is honoured only while a record for its user id sits in the
session cache. Tokens are stateless; deleting the record revokes every token
issued for that user, whatever their own expiry says.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from http import HTTPStatus

from authapi.application.services.tokens import JwtTokenCodec, generate_rsa_key_pair
from authapi.domain.sessions.entities import TokenClaims, TokenKind, TokenPair
from authapi.domain.sessions.exceptions import (InvalidOrExpiredTokenError,
                                                MissingCredentialError,
                                                RefreshFailedError,
                                                SessionExpiredError,
                                                UnauthenticatedError)
from authapi.domain.sessions.repositories import SessionCache
from authapi.domain.users.entities import User
from authapi.domain.users.exceptions import InvalidCredentialsError
from authapi.domain.users.repositories import PasswordHasher, UserRepository
from authapi.shared.config import CacheConfig, TokenConfig
from authapi.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class SessionManagerConfig:
    access_private_key: str
    access_public_key: str
    refresh_private_key: str
    refresh_public_key: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    session_ttl: timedelta
    algorithm: str = "RS256"
    # Stores the password hash in the session record too; see DESIGN.md.
    store_full_snapshot: bool = False

    @classmethod
    def from_settings(cls, tokens: TokenConfig, cache: CacheConfig) -> SessionManagerConfig:
        access_private, access_public = tokens.access_private_key, tokens.access_public_key
        refresh_private, refresh_public = tokens.refresh_private_key, tokens.refresh_public_key
        if not (access_private and access_public):
            logger.warning("session.config: access keys missing, using an ephemeral key pair")
            access_private, access_public = generate_rsa_key_pair()
        if not (refresh_private and refresh_public):
            logger.warning("session.config: refresh keys missing, using an ephemeral key pair")
            refresh_private, refresh_public = generate_rsa_key_pair()

        return cls(
            access_private_key=access_private,
            access_public_key=access_public,
            refresh_private_key=refresh_private,
            refresh_public_key=refresh_public,
            access_ttl=timedelta(minutes=tokens.access_ttl_minutes),
            refresh_ttl=timedelta(minutes=tokens.refresh_ttl_minutes),
            session_ttl=timedelta(minutes=cache.session_ttl_minutes),
            algorithm=tokens.algorithm,
            store_full_snapshot=cache.store_full_snapshot,
        )


class SessionManager:
    def __init__(
        self,
        *,
        config: SessionManagerConfig,
        users: UserRepository,
        cache: SessionCache,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._users = users
        self._cache = cache
        self._password_hasher = password_hasher
        self._clock = clock
        self._access_codec = JwtTokenCodec(
            kind=TokenKind.ACCESS,
            private_key=config.access_private_key,
            public_key=config.access_public_key,
            algorithm=config.algorithm,
        )
        self._refresh_codec = JwtTokenCodec(
            kind=TokenKind.REFRESH,
            private_key=config.refresh_private_key,
            public_key=config.refresh_public_key,
            algorithm=config.algorithm,
        )

    @property
    def config(self) -> SessionManagerConfig:
        return self._config

    def issue_session(self, user: User) -> TokenPair:
        """Open a session for an already authenticated user and mint its tokens."""
        self._cache.set(
            user.id,
            self._snapshot(user),
            int(self._config.session_ttl.total_seconds()),
        )
        now = self._clock()
        pair = TokenPair(
            access_token=self._access_codec.encode(
                user.id, issued_at=now, ttl=self._config.access_ttl
            ),
            refresh_token=self._refresh_codec.encode(
                user.id, issued_at=now, ttl=self._config.refresh_ttl
            ),
        )
        logger.info(f"session.issue: user_id={user.id}")
        return pair

    def verify_access(self, token: str | None) -> User:
        if not token:
            raise MissingCredentialError()

        claims = self._access_codec.decode(token)
        if claims is None:
            raise InvalidOrExpiredTokenError()

        user = self._resolve_session_user(claims)
        if user is None:
            raise SessionExpiredError()
        return user

    @staticmethod
    def require_user(user: User | None) -> User:
        if user is None:
            raise UnauthenticatedError()
        return user

    def refresh_access(self, token: str | None) -> str:
        """Mint a fresh access token. The refresh token and the session TTL stay as they are."""
        claims = self._refresh_codec.decode(token) if token else None
        user = self._resolve_session_user(claims) if claims else None
        if user is None:
            logger.warning("session.refresh: rejected")
            raise RefreshFailedError()

        access_token = self._access_codec.encode(
            user.id, issued_at=self._clock(), ttl=self._config.access_ttl
        )
        logger.info(f"session.refresh: user_id={user.id}")
        return access_token

    def logout(self, user: User) -> None:
        self._cache.delete(user.id)
        logger.info(f"session.logout: user_id={user.id}")

    def change_password(self, user: User, old_password: str, new_password: str) -> User:
        # Existing sessions and tokens stay valid after a password change.
        if not self._password_hasher.verify(old_password, user.password_hash):
            raise InvalidCredentialsError("Invalid password", status=HTTPStatus.FORBIDDEN)

        updated = self._users.save(
            user.with_password_hash(self._password_hasher.hash(new_password))
        )
        logger.info(f"session.change_password: user_id={user.id}")
        return updated

    def _resolve_session_user(self, claims: TokenClaims) -> User | None:
        if self._cache.get(claims.subject) is None:
            logger.debug(f"session.resolve: no session for user_id={claims.subject}")
            return None
        # Live record, not the cached snapshot.
        return self._users.find_by_id(claims.subject)

    def _snapshot(self, user: User) -> str:
        snapshot = user.to_public()
        if self._config.store_full_snapshot:
            snapshot["password_hash"] = user.password_hash
        return json.dumps(snapshot)


__all__ = ["SessionManager", "SessionManagerConfig"]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request guards: who is calling, and is anybody calling at all."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from authapi.application.services.session_manager import SessionManager
from authapi.domain.users.entities import User
from authapi.shared.errors.base import DomainError
from authapi.shared.logging import logger, set_user_id

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"
LOGGED_IN_COOKIE = "logged_in"


def extract_access_token() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(ACCESS_COOKIE) or None


def current_user() -> User:
    return SessionManager.require_user(getattr(g, "current_user", None))


class AuthGuard:
    def __init__(self, sessions: SessionManager) -> None:
        self._sessions = sessions

    def deserialize_user(self) -> None:
        """Resolve the caller from the access token; usable as a before_request hook."""
        try:
            user = self._sessions.verify_access(extract_access_token())
        except DomainError as exc:
            logger.info(f"auth.deserialize: {exc.code} on {request.method} {request.path}")
            raise
        g.current_user = user
        g.user_id = user.id
        set_user_id(user.id)

    @staticmethod
    def require_user() -> None:
        current_user()

    def protect(self, view: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view)
        def inner(*args, **kwargs):
            self.deserialize_user()
            self.require_user()
            return view(*args, **kwargs)

        return inner


__all__ = [
    "ACCESS_COOKIE",
    "AuthGuard",
    "LOGGED_IN_COOKIE",
    "REFRESH_COOKIE",
    "current_user",
    "extract_access_token",
]

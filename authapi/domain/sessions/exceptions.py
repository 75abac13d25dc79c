# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authapi.shared.errors.base import DomainError


class MissingCredentialError(DomainError):
    code = "missing_credential"
    status = HTTPStatus.UNAUTHORIZED
    message = "You are not logged in"


class InvalidOrExpiredTokenError(DomainError):
    code = "invalid_or_expired_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid token or user doesn't exist"


class SessionExpiredError(DomainError):
    code = "session_expired"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid token or session has expired"


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED
    message = "Session has expired or user doesn't exist"


class RefreshFailedError(DomainError):
    # One failure for every cause so callers cannot tell which check rejected them.
    code = "refresh_failed"
    status = HTTPStatus.FORBIDDEN
    message = "Could not refresh access token"

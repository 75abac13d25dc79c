# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import TokenClaims, TokenKind, TokenPair
from .exceptions import (InvalidOrExpiredTokenError, MissingCredentialError,
                         RefreshFailedError, SessionExpiredError,
                         UnauthenticatedError)
from .repositories import SessionCache

__all__ = [
    "InvalidOrExpiredTokenError",
    "MissingCredentialError",
    "RefreshFailedError",
    "SessionCache",
    "SessionExpiredError",
    "TokenClaims",
    "TokenKind",
    "TokenPair",
    "UnauthenticatedError",
]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import User
from .exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from .repositories import PasswordHasher, UserRepository

__all__ = [
    "InvalidCredentialsError",
    "PasswordHasher",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserRepository",
]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authapi.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "duplicate_email"
    status = HTTPStatus.CONFLICT
    message = "User with that email already exist"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST
    message = "Invalid email or password"


class UserNotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found"

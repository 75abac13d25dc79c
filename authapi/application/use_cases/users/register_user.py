# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from authapi.domain.users.entities import User
from authapi.domain.users.exceptions import UserAlreadyExistsError
from authapi.domain.users.repositories import PasswordHasher, UserRepository
from authapi.shared.logging import logger


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, name: str, email: str, password: str) -> User:
        email = normalize_email(email)
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()
        now = datetime.now(UTC)
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=self._password_hasher.hash(password),
            created_at=now,
            updated_at=now,
        )
        persisted = self._users.save(user)
        logger.info(f"users.register: ok user_id={persisted.id}")
        return persisted

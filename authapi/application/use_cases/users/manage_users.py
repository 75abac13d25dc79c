# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account CRUD for authenticated callers."""

from __future__ import annotations

from authapi.application.use_cases.users.register_user import normalize_email
from authapi.domain.users.entities import User
from authapi.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from authapi.domain.users.repositories import UserRepository
from authapi.shared.logging import logger


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, *, name: str | None = None, email: str | None = None) -> list[User]:
        if email is not None:
            email = normalize_email(email)
        return self._users.find_all(name=name, email=email)


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(
        self, user_id: str, *, name: str | None = None, email: str | None = None
    ) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        if email is not None:
            email = normalize_email(email)
            owner = self._users.find_by_email(email)
            if owner is not None and owner.id != user.id:
                raise UserAlreadyExistsError()

        updated = self._users.save(user.with_profile(name=name, email=email))
        logger.info(f"users.update: ok user_id={user_id}")
        return updated


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> None:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        self._users.delete(user)
        logger.info(f"users.delete: ok user_id={user_id}")

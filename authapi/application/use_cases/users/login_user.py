# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from authapi.application.services.session_manager import SessionManager
from authapi.application.use_cases.users.register_user import normalize_email
from authapi.domain.sessions.entities import TokenPair
from authapi.domain.users.entities import User
from authapi.domain.users.exceptions import InvalidCredentialsError
from authapi.domain.users.repositories import PasswordHasher, UserRepository


@dataclass(slots=True, frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionManager,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher

    def execute(self, email: str, password: str) -> LoginResult:
        user = self._users.find_by_email(normalize_email(email))
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        if not password_valid:
            raise InvalidCredentialsError()

        tokens = self._sessions.issue_session(user)
        return LoginResult(user=user, tokens=tokens)

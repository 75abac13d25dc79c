# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authapi.application.services.session_manager import SessionManager
from authapi.domain.users.entities import User


class ChangePasswordUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, user: User, old_password: str, new_password: str) -> User:
        return self._sessions.change_password(user, old_password, new_password)

"""Use-case for closing the caller's session."""

from __future__ import annotations

from authapi.application.services.session_manager import SessionManager
from authapi.domain.users.entities import User


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, user: User) -> None:
        self._sessions.logout(user)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authapi.application.services.session_manager import SessionManager


class RefreshAccessTokenUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, refresh_token: str | None) -> str:
        return self._sessions.refresh_access(refresh_token)

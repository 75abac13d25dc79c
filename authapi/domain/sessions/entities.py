# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TokenKind(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True, frozen=True)
class TokenClaims:

    subject: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str
    refresh_token: str

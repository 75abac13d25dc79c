# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from flask import Response

from .guards import ACCESS_COOKIE, LOGGED_IN_COOKIE, REFRESH_COOKIE


@dataclass(slots=True, frozen=True)
class SessionCookies:
    access_max_age: timedelta
    refresh_max_age: timedelta
    secure: bool = False
    samesite: str = "Lax"

    def attach(self, response: Response, access_token: str, refresh_token: str | None = None) -> None:
        access_age = int(self.access_max_age.total_seconds())
        response.set_cookie(
            ACCESS_COOKIE,
            access_token,
            httponly=True,
            samesite=self.samesite,
            secure=self.secure,
            max_age=access_age,
        )
        if refresh_token:
            response.set_cookie(
                REFRESH_COOKIE,
                refresh_token,
                httponly=True,
                samesite=self.samesite,
                secure=self.secure,
                max_age=int(self.refresh_max_age.total_seconds()),
            )
        # Readable by front-ends that cannot see the HTTP-only cookies.
        response.set_cookie(
            LOGGED_IN_COOKIE,
            "true",
            httponly=False,
            samesite=self.samesite,
            secure=self.secure,
            max_age=access_age,
        )

    def clear(self, response: Response) -> None:
        for name in (ACCESS_COOKIE, REFRESH_COOKIE, LOGGED_IN_COOKIE):
            response.delete_cookie(name, samesite=self.samesite, secure=self.secure)


__all__ = ["SessionCookies"]

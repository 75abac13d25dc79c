# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error taxonomy.

Every failure the API reports is an ``AppError``: a machine-readable ``code``,
the HTTP ``status`` it maps to at the boundary, a human ``message`` and an
optional ``context`` (validation details). Nothing else reaches the client.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

GENERIC_FAILURE_MESSAGE = "Something went wrong"


@dataclass(slots=True, eq=False)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    @property
    def is_client_error(self) -> bool:
        return self.status < HTTPStatus.INTERNAL_SERVER_ERROR

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "fail" if self.is_client_error else "error",
            "error": self.code,
            "message": self.message or self.status.phrase,
        }
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Expected outcome of a business rule.

    Subclasses declare ``code``, ``status`` and ``message`` as class
    attributes; the constructor only overrides them when asked to.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=getattr(self, "code", "domain_error"),
            status=status or getattr(self, "status", HTTPStatus.BAD_REQUEST),
            message=message or getattr(self, "message", ""),
            context=context,
        )


class InfrastructureError(AppError):
    """A backing service (database, session cache) failed; details stay in the logs."""

    def __init__(self, code: str = "internal_error") -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=GENERIC_FAILURE_MESSAGE,
        )


class ValidationError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.BAD_REQUEST,
            message="Invalid request payload",
            context=context,
        )

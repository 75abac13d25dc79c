from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from authapi.domain.users.entities import User

from .auth import EmailField, NameField


class UpdateUserRequestDTO(BaseModel):
    name: NameField | None = None
    email: EmailField | None = None


class UserQueryDTO(BaseModel):
    name: str | None = None
    email: str | None = None


def user_payload(user: User) -> dict[str, Any]:
    return {"status": "success", "data": {"user": user.to_public()}}


def users_payload(users: list[User]) -> dict[str, Any]:
    return {
        "status": "success",
        "results": len(users),
        "data": {"users": [user.to_public() for user in users]},
    }

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from authapi.domain.users.entities import User as DomainUser
from authapi.domain.users.exceptions import UserAlreadyExistsError
from authapi.domain.users.repositories import UserRepository
from authapi.infrastructure.db.models import EMAIL_UNIQUE_INDEX, User
from authapi.infrastructure.db.session import session_scope


def _aware(value: datetime) -> datetime:
    # SQLite drops the offset; everything we write is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _is_duplicate_email(exc: IntegrityError) -> bool:
    # SQLite names the column, PostgreSQL and MySQL name the index.
    detail = str(exc.orig)
    return EMAIL_UNIQUE_INDEX in detail or "users.email" in detail


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_id(self, user_id: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

    def find_all(
        self, *, name: str | None = None, email: str | None = None
    ) -> list[DomainUser]:
        query = select(User).order_by(User.created_at)
        if name is not None:
            query = query.where(User.name == name)
        if email is not None:
            query = query.where(User.email == email)
        with session_scope() as session:
            return [_to_domain(row) for row in session.scalars(query)]

    def save(self, user: DomainUser) -> DomainUser:
        with session_scope() as session:
            row = session.get(User, user.id)
            if row is None:
                row = User(
                    id=user.id,
                    name=user.name,
                    email=user.email,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                session.add(row)
            else:
                row.name = user.name
                row.email = user.email
                row.password_hash = user.password_hash
            try:
                session.flush()
            except IntegrityError as exc:
                if _is_duplicate_email(exc):
                    raise UserAlreadyExistsError() from exc
                raise
            session.refresh(row)
            return _to_domain(row)

    def delete(self, user: DomainUser) -> None:
        with session_scope() as session:
            row = session.get(User, user.id)
            if row is not None:
                session.delete(row)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from authapi.shared.config import DatabaseConfig, load_config
from authapi.shared.errors.base import AppError
from authapi.shared.logging import logger


class Base(DeclarativeBase):
    pass


def build_engine(config: DatabaseConfig) -> Engine:
    url = make_url(config.url)
    options: dict[str, Any] = {"echo": False, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        # One file shared by every request thread.
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
    else:
        options.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )

    engine = create_engine(url, **options)
    logger.debug(f"db.engine: backend={url.get_backend_name()}")
    return engine


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    """One unit of work: commit on success, roll back on any failure."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except AppError as exc:
        # Expected outcomes such as a duplicate email; the caller reports them.
        logger.debug(f"db.session: rollback on {exc.code}")
        session.rollback()
        raise
    except Exception:
        logger.exception("db.session: rollback on unexpected error")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()


def init_db() -> None:
    from authapi.infrastructure.db import models  # noqa: F401  registers the tables

    Base.metadata.create_all(bind=ENGINE)
    logger.info("db: schema ensured")

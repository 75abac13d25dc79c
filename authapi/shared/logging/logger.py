"""Loguru setup with per-request context.

Every record carries the request correlation id and, once the auth guard has
resolved the caller, the user id. Both live in ContextVars so they follow the
request through use cases and repositories without being passed around.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<blue>user={extra[user_id]}</blue> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")
_USER_ID: ContextVar[str] = ContextVar("user_id", default="-")

_logger.configure(extra={"correlation_id": "-", "user_id": "-"})

# Third-party loggers that are too chatty at DEBUG.
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "urllib3": logging.WARNING, "sqlalchemy.engine": logging.WARNING}


def _context() -> dict[str, str]:
    return {"correlation_id": _CORRELATION_ID.get(), "user_id": _USER_ID.get()}


def _log_file_path() -> str:
    configured = os.getenv("LOG_FILE")
    if configured:
        return configured
    return os.path.abspath(
        os.path.join(os.path.dirname(__file__), "../../instance/authapi.log")
    )


class _InterceptHandler(logging.Handler):
    """Routes stdlib logging (werkzeug, SQLAlchemy, redis) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(**_context()).opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Proxy for loguru that binds the current request context on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def set_user_id(value: str | None) -> None:
    _USER_ID.set(value or "-")


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")
    _USER_ID.set("-")


def setup_logging(level: str | None = None) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = _log_file_path()
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    _logger.remove()
    common = {"level": level, "format": _FMT, "filter": sanitize_record, "backtrace": False, "diagnose": False}
    _logger.add(sys.stderr, colorize=True, **common)
    _logger.add(
        log_file,
        colorize=False,
        enqueue=True,
        encoding="utf-8",
        rotation="10 MB",
        retention=5,
        **common,
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "set_user_id",
    "setup_logging",
]

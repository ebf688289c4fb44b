"""loguru setup with per-request context.

Every record carries ``correlation_id`` (one per HTTP request) and
``subject`` (the authenticated username, once a bearer token was accepted).
Both live in ContextVars; the hashing pool runs jobs in a copy of the
caller's context, so its log lines carry the same ids.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

if TYPE_CHECKING:
    from authcore.shared.config import LoggingConfig

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<blue>{extra[subject]}</blue> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")
_SUBJECT: ContextVar[str] = ContextVar("subject", default="-")

_logger.configure(extra={"correlation_id": "-", "subject": "-"})

# Chatty third-party loggers routed through the intercept handler.
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}


def _default_log_file() -> str:
    instance = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../instance"))
    return os.path.join(instance, "app.log")


def _context() -> dict[str, str]:
    return {"correlation_id": _CORRELATION_ID.get(), "subject": _SUBJECT.get()}


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(**_context()).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Drop-in for loguru's logger that binds the current request context."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def bind_subject(subject: str | None) -> None:
    _SUBJECT.set(subject or "-")


def clear_request_context() -> None:
    _CORRELATION_ID.set("-")
    _SUBJECT.set("-")


def setup_logging(config: LoggingConfig) -> None:
    level = config.effective_level
    log_file = config.file or _default_log_file()
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        log_file,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        serialize=config.json_file,
        rotation=config.rotation,
        retention=config.retention,
        backtrace=False,
        # Tracebacks with local variables would expose passwords.
        diagnose=False,
        enqueue=True,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "bind_subject",
    "clear_request_context",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]

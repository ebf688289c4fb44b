# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Engine and session factory for the credential store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from authcore.shared.config import DatabaseConfig, load_config
from authcore.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _sqlite_options(config: DatabaseConfig) -> dict[str, Any]:
    options: dict[str, Any] = {
        "connect_args": {"check_same_thread": False, "timeout": int(config.pool_timeout)},
    }
    if make_url(config.url).database in (None, "", ":memory:"):
        # An in-memory database exists per connection; share a single one.
        options["poolclass"] = StaticPool
    return options


def build_engine(config: DatabaseConfig) -> Engine:
    if make_url(config.url).get_backend_name() == "sqlite":
        options = _sqlite_options(config)
    else:
        options = {
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
            "pool_pre_ping": True,
        }
    engine = create_engine(config.url, **options)
    logger.debug(f"db.engine: {engine.url.render_as_string(hide_password=True)}")
    return engine


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = scoped_session(sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False))


@contextmanager
def session_scope() -> Iterator[Session]:
    """One unit of work: commit on success, roll back on any exception."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        logger.debug("db.session: rolled back")
        session.rollback()
        raise
    finally:
        SessionLocal.remove()


def init_db() -> None:
    # Importing the models registers their tables on Base.metadata.
    from authcore.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info(f"db.schema: ensured tables {sorted(Base.metadata.tables)}")

"""Process-wide engine and the ``session_scope`` unit of work used by every route."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import Settings, get_settings
from .monitoring import instrument_engine

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class _Database:
    engine: Engine
    sessions: sessionmaker[Session]


_database: Optional[_Database] = None
_lock = threading.Lock()


def engine_options(database_url: str, settings: Settings) -> Dict[str, Any]:
    """Keyword arguments for ``create_engine`` that suit the configured backend.

    In-memory SQLite shares one connection so every session sees the same tables;
    file-backed SQLite waits on locks instead of failing; anything else gets a
    sized pool.
    """
    options: Dict[str, Any] = {"echo": settings.database_echo, "future": True}
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return options

    connect_args: Dict[str, Any] = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    else:
        connect_args["timeout"] = SQLITE_BUSY_TIMEOUT_SECONDS
    options["connect_args"] = connect_args
    return options


def _open(settings: Settings) -> _Database:
    if not settings.database_url:
        raise RuntimeError("ADVISOR_DATABASE_URL must be configured before using the database.")
    engine = create_engine(settings.database_url, **engine_options(settings.database_url, settings))
    instrument_engine(engine)
    logger.info("Opened %s engine", engine.dialect.name)
    return _Database(
        engine=engine,
        sessions=sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True),
    )


def _current() -> _Database:
    global _database
    database = _database
    if database is None:
        with _lock:
            if _database is None:
                _database = _open(get_settings())
            database = _database
    return database


def get_engine() -> Engine:
    return _current().engine


def get_session_factory() -> sessionmaker[Session]:
    return _current().sessions


@contextmanager
def session_scope(*, commit: bool = True) -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on any error."""
    session = get_session_factory()()
    try:
        yield session
        if commit:
            session.commit()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Rolling back session after %s", type(exc).__name__)
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engine() -> None:
    global _database
    with _lock:
        database, _database = _database, None
    if database is not None:
        database.engine.dispose()


__all__ = [
    "dispose_engine",
    "engine_options",
    "get_engine",
    "get_session_factory",
    "session_scope",
]

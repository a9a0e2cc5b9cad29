"""SQLAlchemy engine and connection lifecycle.

The service runs on SQLite by default (a single `clients.db` file, as the
original deployment did) and also accepts a PostgreSQL URL. No declarative
models are defined here; this module only manages the process-wide engine.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from app.config import database_url

logger = logging.getLogger(__name__)


# Module-level cached Engine shared by every request
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def _enable_sqlite_transactions(engine: Engine) -> None:
    """Let SQLAlchemy own BEGIN on pysqlite.

    The stdlib driver defers BEGIN until the first write, which would leave the
    snapshot SELECT of an update outside its transaction. Disabling the driver's
    own handling and emitting BEGIN on SQLAlchemy's begin event fixes that.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    Reuses a module-level Engine so repositories share one pool; without a URL
    the current engine is returned, or one is built from configuration. For
    SQLite in-memory URLs, use a StaticPool to keep a single connection alive
    across threads during tests.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _ENGINE_URL or database_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        is_sqlite = resolved_url.startswith("sqlite")
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in resolved_url:
                kwargs["poolclass"] = StaticPool
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        if is_sqlite:
            _enable_sqlite_transactions(_ENGINE)
        logger.info("db_engine_created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


def reset_engine() -> None:
    """Dispose the cached engine so the next call rebuilds it from config."""
    global _ENGINE, _ENGINE_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None


@contextmanager
def transaction() -> Iterator[Connection]:
    """Yield a connection inside one transaction; commit on exit, roll back on error."""
    eng = get_engine()
    with eng.connect() as conn:
        trans = conn.begin()
        try:
            yield conn
            trans.commit()
        except Exception:
            trans.rollback()
            logger.info("db_transaction_rolled_back")
            raise


__all__ = ["get_engine", "reset_engine", "transaction"]

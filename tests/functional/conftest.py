from __future__ import annotations

"""Functional test bootstrap.

Points the app at a file-backed SQLite database under tmp/ before any import
of app modules, applies the packaged migrations once per session and empties
the clients table before every test.
"""

import os
import pathlib
from typing import Any, Callable, Dict, Iterable

import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Migrations are applied explicitly below, not by app startup
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap() -> None:
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from app.db.base import get_engine
    from app.db.migrations_runner import apply_migrations

    apply_migrations(get_engine(os.environ["TEST_DATABASE_URL"]))
    yield


@pytest.fixture(autouse=True)
def empty_clients_table(functional_sqlite_bootstrap) -> None:
    from sqlalchemy import text as sql_text

    from app.db.base import get_engine

    with get_engine().begin() as conn:
        conn.execute(sql_text("DELETE FROM clients"))
    yield


@pytest.fixture
def seed_clients() -> Callable[[Iterable[tuple]], None]:
    """Insert ``(id, status, priority)`` tuples; names are derived from ids."""
    from app.logic import repository_clients

    def _seed(rows: Iterable[tuple]) -> None:
        for client_id, status, priority in rows:
            fields: Dict[str, Any] = {
                "id": client_id,
                "name": f"Client {client_id}",
                "description": f"Description {client_id}",
                "status": status,
                "priority": priority,
            }
            repository_clients.insert_client(fields)

    return _seed


@pytest.fixture
def api():
    from fastapi.testclient import TestClient

    from app.main import create_app

    return TestClient(create_app())

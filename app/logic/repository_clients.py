"""Client data access helpers.

Keeps route handlers free of inline SQL. Functions accept an optional open
connection so callers can run several of them inside one transaction; when
omitted, a short-lived connection from the shared engine is used.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from app.db.base import get_engine
from app.models.client import ClientRow

_FIELDS = ("id", "name", "description", "status", "priority")
_COLUMNS = ", ".join(_FIELDS)


@contextmanager
def _connection(conn: Connection | None) -> Iterator[Connection]:
    if conn is not None:
        yield conn
        return
    with get_engine().connect() as own:
        yield own


def client_exists(client_id: int, conn: Connection | None = None) -> bool:
    with _connection(conn) as c:
        row = c.execute(
            sql_text("SELECT 1 FROM clients WHERE id = :id LIMIT 1"),
            {"id": client_id},
        ).fetchone()
    return row is not None


def get_client(client_id: int, conn: Connection | None = None) -> Optional[ClientRow]:
    with _connection(conn) as c:
        row = c.execute(
            sql_text(f"SELECT {_COLUMNS} FROM clients WHERE id = :id"),
            {"id": client_id},
        ).mappings().fetchone()
    return ClientRow.from_mapping(row) if row else None


def list_clients(status: Optional[str] = None, conn: Connection | None = None) -> List[ClientRow]:
    """All clients (or one lane) in store-native order, i.e. by id."""
    with _connection(conn) as c:
        if status is None:
            rows = c.execute(sql_text(f"SELECT {_COLUMNS} FROM clients ORDER BY id")).mappings().all()
        else:
            rows = c.execute(
                sql_text(f"SELECT {_COLUMNS} FROM clients WHERE status = :status ORDER BY id"),
                {"status": status},
            ).mappings().all()
    return [ClientRow.from_mapping(r) for r in rows]


def load_snapshot(conn: Connection | None = None) -> List[ClientRow]:
    """All clients ordered by (status, priority); id breaks ties."""
    with _connection(conn) as c:
        rows = c.execute(
            sql_text(f"SELECT {_COLUMNS} FROM clients ORDER BY status, priority, id")
        ).mappings().all()
    return [ClientRow.from_mapping(r) for r in rows]


def insert_client(fields: Mapping[str, Any], conn: Connection | None = None) -> None:
    """Insert a client verbatim; store constraint violations propagate."""
    params = {key: fields.get(key) for key in _FIELDS}
    stmt = sql_text(
        f"INSERT INTO clients ({_COLUMNS}) VALUES (:id, :name, :description, :status, :priority)"
    )
    if conn is not None:
        conn.execute(stmt, params)
        return
    with get_engine().begin() as c:
        c.execute(stmt, params)


def update_assignments(conn: Connection, rows: Sequence[ClientRow]) -> int:
    """Persist (status, priority) for each row; returns the number of rows written."""
    if not rows:
        return 0
    conn.execute(
        sql_text("UPDATE clients SET status = :status, priority = :priority WHERE id = :id"),
        [{"status": r.status, "priority": r.priority, "id": r.id} for r in rows],
    )
    return len(rows)


def ping(conn: Connection | None = None) -> None:
    with _connection(conn) as c:
        c.execute(sql_text("SELECT 1")).fetchone()


__all__ = [
    "client_exists",
    "get_client",
    "list_clients",
    "load_snapshot",
    "insert_client",
    "update_assignments",
    "ping",
]

"""Client read/write flows used by the clients routes.

Each flow validates raw request values, talks to the repository and maps
store failures onto the client error kinds. An update runs identifier
validation, the snapshot read, the reorder and every write inside one
transaction so concurrent updates cannot leave a lane with duplicate ranks.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional

from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError

from app.db.base import transaction
from app.logic import repository_clients
from app.logic.lane_reorder import changed_rows, lanes_with_gaps, reorder
from app.logic.validation import (
    NotFound,
    StoreRejected,
    StoreUnavailable,
    fits_store_integer,
    parse_int,
    validate_identifier,
    validate_lane,
    validate_rank,
    validate_update_body,
)
from app.models.client import ClientRow

logger = logging.getLogger(__name__)


@contextmanager
def _store_outage(action: str) -> Iterator[None]:
    """Map store outages (locked, unreachable, missing schema) to StoreUnavailable."""
    try:
        yield
    except OperationalError as exc:
        logger.error("store_unavailable action=%s", action, exc_info=True)
        raise StoreUnavailable("Store unavailable.", str(exc.orig)) from exc


def list_clients(raw_status: Optional[str]) -> List[ClientRow]:
    """List all clients, or one lane when a non-empty status filter is given."""
    status = validate_lane(raw_status) if raw_status else None
    with _store_outage("list"):
        return repository_clients.list_clients(status)


def fetch_client(raw_id: Any) -> ClientRow:
    with _store_outage("fetch"), transaction() as conn:
        client_id = validate_identifier(raw_id, conn=conn)
        row = repository_clients.get_client(client_id, conn=conn)
    if row is None:
        raise NotFound("Invalid id provided.", "Cannot find client with that id.")
    return row


def create_client(payload: Mapping[str, Any]) -> None:
    """Insert the five client fields as given; no lane renumbering happens here."""
    fields = dict(payload or {})
    client_id = parse_int(fields.get("id"))
    if client_id is None or not fits_store_integer(client_id):
        raise StoreRejected("Invalid id provided.", "Id can only be integer.")
    priority = parse_int(fields.get("priority"))
    if priority is None or not fits_store_integer(priority):
        raise StoreRejected("Invalid priority provided.", "Priority can only be positive integer.")
    fields.update(id=client_id, priority=priority)
    try:
        with _store_outage("create"):
            repository_clients.insert_client(fields)
    except (IntegrityError, DataError, InterfaceError) as exc:
        logger.info("client_create_rejected id=%s reason=%s", client_id, exc.orig)
        raise StoreRejected("Client rejected.", str(exc.orig)) from exc
    logger.info("client_created id=%s status=%s priority=%s", client_id, fields.get("status"), priority)


def update_client(raw_id: Any, raw_body: Any = None) -> List[ClientRow]:
    """Move a client to a new lane and/or priority and return the re-sorted list.

    ``raw_body`` is the decoded PUT body; ``None`` for status or priority
    means "not provided". The id is checked before the body.
    """
    with _store_outage("update"):
        with transaction() as conn:
            client_id = validate_identifier(raw_id, conn=conn)
            raw_status, raw_priority = validate_update_body(raw_body)
            lane = validate_lane(raw_status) if raw_status is not None else None
            rank = validate_rank(raw_priority) if raw_priority is not None else None

            before = repository_clients.load_snapshot(conn)
            gaps = lanes_with_gaps(before)
            if gaps:
                logger.warning("lane_gaps_before_reorder lanes=%s", gaps)
            after = reorder(before, client_id, new_lane=lane, new_rank=rank)
            moved = changed_rows(before, after)
            written = repository_clients.update_assignments(conn, moved)

        logger.info(
            "client_reordered id=%s status=%s priority=%s rows_written=%s",
            client_id,
            lane,
            rank,
            written,
        )
        return repository_clients.load_snapshot()


def store_health() -> None:
    """Raise StoreUnavailable when the store cannot answer a trivial query."""
    with _store_outage("health"):
        repository_clients.ping()


__all__ = ["list_clients", "fetch_client", "create_client", "update_client", "store_health"]

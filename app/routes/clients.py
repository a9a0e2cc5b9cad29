"""Client lane endpoints: list, fetch, and lane/priority update."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Query

from app.logic.clients_write import fetch_client, list_clients, update_client
from app.models.client import ClientOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/clients",
    summary="List clients, optionally filtered by lane",
    operation_id="listClients",
    response_model=List[ClientOut],
)
def get_clients(status: Optional[str] = Query(None, description="backlog | in-progress | complete")):
    return [row.to_dict() for row in list_clients(status)]


@router.get(
    "/clients/{id}",
    summary="Get a client by id",
    operation_id="getClient",
    response_model=ClientOut,
)
def get_client(id: str):
    return fetch_client(id).to_dict()


@router.put(
    "/clients/{id}",
    summary="Move a client to a new lane and/or priority",
    operation_id="updateClient",
    response_model=List[ClientOut],
)
def put_client(id: str, payload: Any = Body(None)):
    """Return every client ordered by (status, priority) after the move.

    Priority 1 is the top of the lane. Out-of-range priorities are clamped to
    the lane; a status change without a priority appends to the new lane.
    The body stays raw so a non-object body gets the same 400 shape as other
    input errors.
    """
    rows = update_client(id, payload)
    return [row.to_dict() for row in rows]


__all__ = ["router", "get_clients", "get_client", "put_client"]

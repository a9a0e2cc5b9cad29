"""Root endpoints: greeting and client creation."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from app.logic.clients_write import create_client

router = APIRouter()

GREETING = "SHIPTIVITY API. Read documentation to see API docs"


@router.get("/", summary="Greeting", operation_id="getRoot")
def get_root():
    return {"message": GREETING}


@router.post("/", summary="Create a client", operation_id="createClient", status_code=201)
def post_client(payload: Dict[str, Any] = Body(...)):
    """Store ``{id, name, description, status, priority}`` exactly as given."""
    create_client(payload)
    return JSONResponse({"message": "Client created"}, status_code=201)


__all__ = ["router", "GREETING", "get_root", "post_client"]

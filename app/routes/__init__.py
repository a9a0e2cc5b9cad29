"""APIRouter registration for the Shiptivity lane API."""

from __future__ import annotations

from fastapi import APIRouter

from app.routes.clients import router as clients_router
from app.routes.root import router as root_router

api_router = APIRouter()
api_router.include_router(clients_router, tags=["Clients"])

__all__ = ["api_router", "root_router"]

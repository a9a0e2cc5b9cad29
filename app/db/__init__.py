"""Database bootstrap utilities for the Shiptivity lane API.

Exposes the shared engine, a scoped transaction helper and the migrations
runner that creates the `clients` table. The DB layer does not leak ORM
models into route handlers.
"""

from app.db.base import get_engine, reset_engine, transaction
from app.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "reset_engine",
    "transaction",
    "apply_migrations",
]

"""FastAPI application package for the Shiptivity lane API.

Exposes the application factory. Cross-cutting middleware (request id, CORS)
and error handlers are wired in `app.main`; business logic lives in
`app/logic/` and route handlers in `app/routes/`.
"""

from __future__ import annotations

from app.main import create_app

__all__ = ["create_app"]

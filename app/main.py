from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.config import AppConfig, load_config
from app.db.base import get_engine, reset_engine
from app.db.migrations_runner import apply_migrations
from app.http.problem import (
    handle_client_api_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from app.http.request_id import RequestIdMiddleware
from app.logging_setup import configure_logging
from app.logic.clients_write import store_health
from app.logic.validation import ClientApiError, StoreUnavailable
from app.middleware.cors import apply_cors
from app.routes import api_router, root_router

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    configure_logging()
    cfg = config or load_config()

    app = FastAPI(title="Shiptivity API")
    app.state.config = cfg

    app.add_exception_handler(ClientApiError, handle_client_api_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=cfg.server.cors_allow_origins)
    app.add_middleware(RequestIdMiddleware)

    # Apply migrations on startup to avoid import-time side effects
    @app.on_event("startup")
    def _apply_migrations() -> None:
        if not cfg.migrations.auto_apply:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(get_engine(cfg.database.dsn))
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup_migrations applied=%s", applied)

    @app.on_event("shutdown")
    def _dispose_engine() -> None:
        reset_engine()
        logger.info("engine_disposed")

    app.include_router(root_router)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", include_in_schema=False)
    def health():
        try:
            store_health()
        except StoreUnavailable:
            return JSONResponse({"status": "degraded", "db": False}, status_code=503)
        return {"status": "ok", "db": True}

    return app


def serve() -> None:
    """Run the API under uvicorn using the configured host and port."""
    import uvicorn

    configure_logging()
    cfg = load_config()
    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port, log_config=None)


# Intentionally do not instantiate the app at import time to prevent side effects.

if __name__ == "__main__":  # pragma: no cover
    serve()

"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (create_app) from an immutable Settings
  - Configure request-context middleware and exception handlers
  - Mount the auth router and the /healthz probe
  - Open/close the PostgreSQL pool when STORAGE_BACKEND=postgres

Collaborators:
  - FastAPI: ASGI web framework
  - RequestContextMiddleware: Request ID and logging context
  - auth_routes.router: auth endpoints
  - container: row store used by /healthz
  - infrastructure.db.pool: open_pool / close_pool

Notes:
  - /healthz follows Kubernetes health check convention
  - Settings validation happens in get_settings(); create_app() accepts an
    explicit Settings for tests
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..container import get_row_store
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, open_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


def _uses_postgres(settings: Settings) -> bool:
    return settings.storage_backend == "postgres" and not settings.is_test_env()


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if _uses_postgres(settings):
            open_pool(settings)

        if settings.is_production() and settings.uses_default_bootstrap_password():
            logger.warning(
                "BOOTSTRAP_PASSWORD usa el valor por defecto en producción"
            )

        logger.info(
            "Journal auth API starting up",
            extra={
                "storage_backend": settings.storage_backend,
                "app_env": settings.app_env,
                "users_table": settings.users_table,
                "tokens_table": settings.tokens_table,
            },
        )
        try:
            yield
        finally:
            if _uses_postgres(settings):
                close_pool()
            logger.info("Journal auth API shutting down")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Trading Journal Auth API",
        version="0.1.0",
        lifespan=_lifespan_for(settings),
        openapi_tags=[
            {"name": "auth", "description": "Login, logout and password rotation"},
            {"name": "accounts", "description": "Account ownership checks"},
        ],
    )

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app, settings)
    app.include_router(auth_router)

    @app.get("/healthz", tags=["health"])
    def healthz() -> JSONResponse:
        store_ok = get_row_store().ping()
        return JSONResponse(
            status_code=200 if store_ok else 503,
            content={"ok": store_ok, "storage": "connected" if store_ok else "down"},
        )

    return app

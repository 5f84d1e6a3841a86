"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize the FastAPI application (title, version, bearer security scheme)
  - Configure middleware (correlation id, global exceptions, request log, CORS)
  - Mount the API router under the /api prefix
  - Open/close the DB pool in the lifespan

Collaborators:
  - FastAPI / CORSMiddleware
  - crosscutting.middleware: CorrelationId, GlobalException, RequestLogging
  - interfaces.api.http.router: health + users endpoints
  - infrastructure.db.pool: init_pool / close_pool

Notes:
  - Starlette runs the LAST added middleware first. Effective order:
      CorrelationId -> GlobalException -> RequestLogging -> CORS -> routes
  - In test environments the in-memory store is wired and no pool is opened.
  - Env validation happens in the lifespan (get_settings), not at import time.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import (
    CORRELATION_ID_HEADER,
    CorrelationIdMiddleware,
    GlobalExceptionMiddleware,
    RequestLoggingMiddleware,
)
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers

API_PREFIX = "/api"

API_DESCRIPTION = (
    "User account API: identity sync and admin user management.\n\n"
    "Protected endpoints require a valid identity-provider JWT as a Bearer token."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes the pool."""
    settings = get_settings()

    uses_database = not settings.is_test()
    if uses_database:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "BigO API starting up",
            extra={
                "app_env": settings.app_env,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "audience_check": bool(settings.clerk_audience),
            },
        )
        yield
    finally:
        if uses_database:
            close_pool()
        logger.info("BigO API shutting down")


def _get_cors_settings() -> tuple[list[str], bool]:
    """CORS origins/credentials, with a fallback for import-time env errors."""
    try:
        settings = get_settings()
        return settings.get_allowed_origins_list(), settings.cors_allow_credentials
    except Exception:
        # R: Tooling may import the app without DATABASE_URL set.
        return ["http://localhost:5173", "http://localhost:5174"], False


def create_app() -> FastAPI:
    """Build the ASGI application."""
    fastapi_app = FastAPI(
        title="BigO API",
        version="1.0.0",
        description=API_DESCRIPTION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Liveness and database probes"},
            {
                "name": "users",
                "description": "Identity sync (any token) and user admin (Admin role)",
            },
        ],
    )

    allowed_origins, allow_credentials = _get_cors_settings()
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_ID_HEADER],
    )
    fastapi_app.add_middleware(RequestLoggingMiddleware)
    fastapi_app.add_middleware(GlobalExceptionMiddleware)
    fastapi_app.add_middleware(CorrelationIdMiddleware)

    fastapi_app.include_router(router, prefix=API_PREFIX)

    register_exception_handlers(fastapi_app)

    return fastapi_app


app = create_app()

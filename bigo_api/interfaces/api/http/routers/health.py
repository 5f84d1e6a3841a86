"""
===============================================================================
CRC CARD — interfaces/api/http/routers/health.py
===============================================================================

Module:
    Probe Router (public)

Responsibilities:
    - GET /health: ping the user store; always 200, verdict in the body.
    - GET /test/test-db: report server/database names of the live connection.

Collaborators:
    - container.get_user_store
    - schemas.health

Notes:
    - A failing test-db raises DatabaseError; the exception handlers render a
      generic 500 without connection details.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone

from bigo_api.container import get_user_store
from bigo_api.crosscutting.logger import logger
from bigo_api.domain.repositories import UserStore
from fastapi import APIRouter, Depends

from ..schemas.health import DatabaseCheckRes, HealthRes

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRes)
def health(store: UserStore = Depends(get_user_store)):
    connected = False
    try:
        connected = store.ping()
    except Exception as e:
        logger.warning("Health check: DB unavailable", extra={"error": str(e)})

    return HealthRes(
        status="Healthy" if connected else "Degraded",
        database="Connected" if connected else "Disconnected",
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/test/test-db", response_model=DatabaseCheckRes)
def test_database(store: UserStore = Depends(get_user_store)):
    info = store.connection_info()
    logger.info(
        "Database connection test succeeded",
        extra={"server": info.server, "database": info.database},
    )
    return DatabaseCheckRes(
        message="Database connection is healthy.",
        server=info.server,
        database=info.database,
    )

"""
===============================================================================
CRC CARD — router.py (root router / composition)
===============================================================================

Responsibilities:
  - Define the root APIRouter included by FastAPI (app.include_router).
  - Centralize RFC7807 responses for OpenAPI.
  - Compose feature routers (health, users).

Collaborators:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (feature sub-routers)

Notes:
  - Included from bigo_api/api/main.py with prefix="/api".
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.health import router as health_router
from .routers.users import router as users_router


def build_router() -> APIRouter:
    """Build the root router (callable from tests without import side effects)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(health_router)
    api_router.include_router(users_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]

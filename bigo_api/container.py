"""
===============================================================================
CRC CARD — bigo_api/container.py (Composition Root / manual DI)
===============================================================================

Responsibilities:
  - Compose dependencies (user store, directory service, token verifier).
  - Expose factories for FastAPI (Depends); tests override them through
    app.dependency_overrides.
  - Keep singletons cached (lru_cache) per process.
  - Centralize runtime decisions based on Settings.

Collaborators:
  - crosscutting.config.get_settings
  - domain.repositories.UserStore (port)
  - infrastructure.repositories (implementations)
  - application.users.UserDirectoryService
  - identity.tokens.ClerkTokenVerifier

Notes:
  - No business logic here.
  - No FastAPI imports (factories only).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.users import UserDirectoryService
from .crosscutting.config import get_settings
from .crosscutting.logger import logger
from .domain.repositories import UserStore
from .identity.tokens import ClerkTokenVerifier, TokenVerifier
from .infrastructure.repositories import InMemoryUserStore, PostgresUserStore


def _is_test_env() -> bool:
    """app_env in {"test", "testing", "ci"} => in-memory adapters."""
    return get_settings().is_test()


@lru_cache(maxsize=1)
def get_user_store() -> UserStore:
    """User store (in-memory in test; Postgres at runtime)."""
    if _is_test_env():
        return InMemoryUserStore()
    return PostgresUserStore()


@lru_cache(maxsize=1)
def get_user_directory_service() -> UserDirectoryService:
    return UserDirectoryService(get_user_store())


@lru_cache(maxsize=1)
def get_token_verifier() -> TokenVerifier:
    """Verifier bound to the configured issuer and its JWKS."""
    settings = get_settings()
    if not settings.clerk_authority:
        logger.warning(
            "CLERK_AUTHORITY is not set; every bearer token will be rejected"
        )
    return ClerkTokenVerifier(
        issuer=settings.clerk_authority,
        jwks_url=settings.get_jwks_url(),
        audience=settings.clerk_audience,
        leeway_seconds=settings.jwt_clock_skew_seconds,
    )


def reset_container() -> None:
    """Drop cached singletons (tests / settings reload)."""
    get_user_store.cache_clear()
    get_user_directory_service.cache_clear()
    get_token_verifier.cache_clear()

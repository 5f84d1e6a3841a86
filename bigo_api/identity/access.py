"""
===============================================================================
CRC CARD — identity/access.py
===============================================================================

Module:
    FastAPI access dependencies (authenticated caller / admin)

Responsibilities:
    - Extract the bearer token (Authorization: Bearer <token>).
    - Verify it and expose IdentityClaims (require_identity).
    - Look the caller's role up in the user store and demand Admin
      (require_admin).

Collaborators:
    - container.get_token_verifier / container.get_user_store
    - identity.tokens.TokenVerifier
    - crosscutting.error_responses: unauthorized / forbidden

Notes:
    - The token carries no role: the stored record is authoritative, so a role
      change applies on the caller's next request.
    - A caller without a stored record has no role and is not an admin.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..container import get_token_verifier, get_user_store
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.exceptions import AuthError
from ..crosscutting.logger import logger
from ..domain.entities import UserRole
from ..domain.repositories import UserStore
from .claims import IdentityClaims
from .tokens import TokenVerifier

# R: auto_error=False so a missing header yields our RFC7807 401, not FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False, description="Identity provider JWT")


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller plus the role found in the user store."""

    claims: IdentityClaims
    role: UserRole | None


def require_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> IdentityClaims:
    """Dependency: any caller presenting a valid token."""
    token = (credentials.credentials if credentials else "").strip()
    if not token:
        raise unauthorized("Missing Bearer token.")

    try:
        payload = verifier.verify(token)
    except AuthError as exc:
        raise unauthorized(exc.message) from exc

    claims = IdentityClaims.from_payload(payload)
    request.state.identity = claims
    return claims


def require_admin(
    claims: IdentityClaims = Depends(require_identity),
    store: UserStore = Depends(get_user_store),
) -> Principal:
    """Dependency: caller whose stored role is Admin."""
    role = None
    if claims.identity_key:
        user = store.find_by_identity_key(claims.identity_key)
        role = user.role if user is not None else None

    if role != UserRole.ADMIN:
        logger.warning(
            "Admin access denied",
            extra={"identity_key": claims.identity_key, "role": role},
        )
        raise forbidden("Admin role required.")

    return Principal(claims=claims, role=role)

"""
===============================================================================
CRC CARD — identity/tokens.py
===============================================================================

Module:
    Identity-provider token verification (Clerk, RS256 via JWKS)

Responsibilities:
    - Fetch signing keys from the issuer JWKS (cached by PyJWKClient).
    - Validate signature, issuer, expiry (with leeway) and, only when
      configured, audience.
    - Translate every verification failure into AuthError.

Collaborators:
    - jwt (PyJWT) / jwt.PyJWKClient
    - crosscutting.exceptions.AuthError
    - container.get_token_verifier: builds the verifier from Settings.

Notes:
    - This service never issues tokens; it only checks them.
    - Roles are NOT read from the token (see identity/access.py).
    - Never log tokens.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Protocol

import jwt
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError

from ..crosscutting.exceptions import AuthError
from ..crosscutting.logger import logger

JWT_ALGORITHMS: list[str] = ["RS256"]

CLAIM_SUB: str = "sub"
CLAIM_EXP: str = "exp"
CLAIM_ISS: str = "iss"


class TokenVerifier(Protocol):
    """Port: turn a raw bearer token into a verified claim set."""

    def verify(self, token: str) -> dict[str, Any]:
        ...


class ClerkTokenVerifier:
    """Verifies tokens issued by the configured authority."""

    def __init__(
        self,
        *,
        issuer: str,
        jwks_url: str,
        audience: str | None = None,
        leeway_seconds: int = 30,
        jwks_client: PyJWKClient | None = None,
    ) -> None:
        self._issuer = issuer
        self._audience = (audience or "").strip() or None
        self._leeway = leeway_seconds
        self._jwks_client = jwks_client or PyJWKClient(jwks_url)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a bearer token.

        Raises:
            AuthError: expired, bad signature, wrong issuer/audience,
                       unknown key or JWKS unreachable.
        """
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=JWT_ALGORITHMS,
                issuer=self._issuer,
                audience=self._audience,
                leeway=self._leeway,
                options={
                    "require": [CLAIM_EXP, CLAIM_ISS],
                    "verify_aud": self._audience is not None,
                },
            )
        except jwt.ExpiredSignatureError as exc:
            logger.warning("Token verification failed: expired")
            raise AuthError("Token expired.", original_error=exc) from exc
        except PyJWKClientError as exc:
            logger.warning(
                "Token verification failed: signing key unavailable",
                extra={"error": str(exc)},
            )
            raise AuthError("Invalid token.", original_error=exc) from exc
        except jwt.InvalidTokenError as exc:
            logger.warning(
                "Token verification failed", extra={"error_type": type(exc).__name__}
            )
            raise AuthError("Invalid token.", original_error=exc) from exc

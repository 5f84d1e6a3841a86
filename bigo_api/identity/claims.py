"""
===============================================================================
CRC CARD — identity/claims.py
===============================================================================

Module:
    Identity claims (verified token payload -> typed claims)

Responsibilities:
    - Pick the identity key, email and display name out of a verified payload.
    - Default the username for first-time sync.

Collaborators:
    - identity/access.py: builds IdentityClaims per request.
    - interfaces/api/http/routers/users.py: sync endpoint.

Notes:
    - Blank claim values are treated as absent.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

# R: Display-name claims in priority order.
USERNAME_CLAIMS: tuple[str, ...] = ("name", "preferred_username", "username")

UNKNOWN_USERNAME = "unknown"


@dataclass(frozen=True, slots=True)
class IdentityClaims:
    """Claims of a verified token that this service cares about."""

    identity_key: str | None
    email: str | None
    username: str | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IdentityClaims":
        username = None
        for claim in USERNAME_CLAIMS:
            username = _clean(payload.get(claim))
            if username:
                break

        return cls(
            identity_key=_clean(payload.get("sub")),
            email=_clean(payload.get("email")),
            username=username,
        )


def resolve_username(email: str | None, username: str | None) -> str:
    """Claim username, else the email local part, else "unknown"."""
    if username:
        return username
    if email:
        local_part = email.split("@", 1)[0].strip()
        if local_part:
            return local_part
    return UNKNOWN_USERNAME


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

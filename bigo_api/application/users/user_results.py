"""
===============================================================================
USER DIRECTORY RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Shared result and error models for the user directory operations, with an
    explicit contract for:
      - not found
      - business conflicts (duplicate email)

Why:
    - Operations return typed results instead of raising "outwards", which
      keeps HTTP mapping in one place and flows easy to unit test.
    - Store failures are NOT results: DatabaseError propagates untouched.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    user_results models (module)

Responsibilities:
    - UserErrorCode: small, stable set of error categories.
    - UserError: code + human message.
    - UserView: response shape of a user (identity_key rendered as "").
    - UserResult / SyncResult: single-user outcomes.

Collaborators:
    - domain.entities.User, UserRole
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ...domain.entities import User, UserRole


class UserErrorCode(str, Enum):
    """
    Error categories of user directory operations.

    - NOT_FOUND: no user with the requested id.
    - DUPLICATE_EMAIL: another user already holds the email.
    """

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str


@dataclass(frozen=True)
class UserView:
    """
    Response shape of a user record.

    Every field is copied verbatim except identity_key, which is "" when the
    record has none (admin-created users).
    """

    id: int
    identity_key: str
    email: str
    username: str
    role: UserRole
    xp_total: int
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            identity_key=user.identity_key or "",
            email=user.email,
            username=user.username,
            role=user.role,
            xp_total=user.xp_total,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass
class UserResult:
    """
    Result of operations returning a single user.

    Contract:
      - error is None => user is present
      - error is not None => user is None
    """

    user: UserView | None = None
    error: UserError | None = None


@dataclass(frozen=True)
class SyncResult:
    """Outcome of identity sync: the record plus whether this call created it."""

    user: UserView
    created: bool

"""
===============================================================================
CRC CARD — schemas/users.py
===============================================================================

Module:
    HTTP schemas for user accounts

Responsibilities:
    - Define request/response DTOs for the users endpoints.
    - Validate input with stable, human messages per field.
    - Serialize camelCase on the wire (snake_case input also accepted).
    - Wrap success payloads in the {status, message, data} envelope.

Collaborators:
    - domain.entities.UserRole
    - application.users.UserView (source of UserRes)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bigo_api.application.users import UserView
from bigo_api.domain.entities import UserRole
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_MAX_LENGTH = 255
USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 100

ROLE_MESSAGE = "Role must be 'Student', 'Admin', or 'Instructor'."

_camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _looks_like_email(value: str) -> bool:
    # R: Exactly one "@" with something on both sides.
    return (
        value.count("@") == 1
        and not value.startswith("@")
        and not value.endswith("@")
    )


def _parse_role(value: Any) -> UserRole:
    if _is_blank(value):
        raise ValueError("Role is required.")
    if isinstance(value, UserRole):
        return value
    try:
        # R: Case-sensitive on purpose; "STUDENT" is rejected.
        return UserRole(value)
    except ValueError:
        raise ValueError(ROLE_MESSAGE) from None


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateUserReq(BaseModel):
    """Admin-created user. Role defaults to Student when omitted."""

    model_config = _camel_config

    email: str | None = Field(default=None, validate_default=True)
    username: str | None = Field(default=None, validate_default=True)
    role: UserRole = Field(default=UserRole.STUDENT)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        if _is_blank(v):
            raise ValueError("Email is required.")
        if not isinstance(v, str) or not _looks_like_email(v):
            raise ValueError("A valid email address is required.")
        if len(v) > EMAIL_MAX_LENGTH:
            raise ValueError(
                f"Email must not exceed {EMAIL_MAX_LENGTH} characters."
            )
        return v

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: Any) -> str:
        if _is_blank(v):
            raise ValueError("Username is required.")
        if (
            not isinstance(v, str)
            or not USERNAME_MIN_LENGTH <= len(v) <= USERNAME_MAX_LENGTH
        ):
            raise ValueError(
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters."
            )
        return v

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> UserRole:
        return _parse_role(v)


class UpdateUserReq(BaseModel):
    """Admin update: both fields are required."""

    model_config = _camel_config

    role: UserRole | None = Field(default=None, validate_default=True)
    is_active: bool | None = Field(default=None, validate_default=True)

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> UserRole:
        return _parse_role(v)

    @field_validator("is_active")
    @classmethod
    def validate_is_active(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("IsActive is required.")
        return v


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(BaseModel):
    model_config = _camel_config

    id: int
    identity_key: str
    email: str
    username: str
    role: UserRole
    xp_total: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_view(cls, view: UserView) -> "UserRes":
        return cls(
            id=view.id,
            identity_key=view.identity_key,
            email=view.email,
            username=view.username,
            role=view.role,
            xp_total=view.xp_total,
            is_active=view.is_active,
            created_at=view.created_at,
            updated_at=view.updated_at,
        )


class UserEnvelope(BaseModel):
    status: str = "success"
    message: str | None = None
    data: UserRes


class UserListEnvelope(BaseModel):
    status: str = "success"
    message: str | None = None
    data: list[UserRes]

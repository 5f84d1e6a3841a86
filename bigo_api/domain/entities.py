"""
===============================================================================
CRC CARD — domain/entities.py
===============================================================================

Module:
    Domain entities (User, UserRole)

Responsibilities:
    - Define the user account record and its role catalog.
    - Keep the data contract shared by store, service and HTTP layers stable.

Collaborators:
    - domain.repositories: UserStore persists/retrieves User.
    - application/users: builds User for inserts, maps User -> UserView.
    - infrastructure/repositories: maps rows -> User.

Principles:
    - No DB/FastAPI dependencies.
    - Data only; business rules live in application/users.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Roles an account can hold. Values are the persisted/wire spelling."""

    STUDENT = "Student"
    ADMIN = "Admin"
    INSTRUCTOR = "Instructor"


@dataclass(frozen=True, slots=True)
class User:
    """
    A row of the `users` table.

    - id is None until the store assigns one.
    - identity_key is the identity-provider subject; None for admin-created users.
    - xp_total is owned by other systems and never mutated here.
    """

    id: int | None
    email: str
    username: str
    role: UserRole = UserRole.STUDENT
    identity_key: str | None = None
    xp_total: int = 0
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

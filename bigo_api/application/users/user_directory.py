"""
===============================================================================
USE CASE SERVICE: User Directory
===============================================================================

Business Goal:
    Own the rules over user accounts:
      - provision a local user the first time a verified identity shows up
      - let admins create, list, read, update (role/active) and soft-delete

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    UserDirectoryService

Responsibilities:
    - sync_from_identity: idempotent lookup-or-insert keyed by identity key.
    - create_admin: enforce email uniqueness (read-then-write) before insert.
    - update: report NOT_FOUND as a result, re-read the row on success.
    - Map User -> UserView at the boundary.

Collaborators:
    - domain.repositories.UserStore
    - user_results: UserView / UserResult / SyncResult / UserError

Notes:
    - Sync and create_admin are check-then-act: two concurrent calls for the
      same key or email may both insert. No unique constraint backs them.
    - DatabaseError from the store propagates; nothing here retries or turns
      a failure into an empty result.
===============================================================================
"""

from __future__ import annotations

from typing import List

from ...crosscutting.logger import logger
from ...domain.entities import User, UserRole
from ...domain.repositories import UserStore
from .user_results import (
    SyncResult,
    UserError,
    UserErrorCode,
    UserResult,
    UserView,
)


class UserDirectoryService:
    """Application service over the user store."""

    def __init__(self, store: UserStore) -> None:
        self._users = store

    def sync_from_identity(
        self, identity_key: str, email: str, username: str
    ) -> SyncResult:
        """
        Return the user for a verified identity, creating it on first sight.

        Precondition: identity_key is non-empty (checked by the caller).
        Existing records are returned as stored; email/username from the
        token do not overwrite them.
        """
        existing = self._users.find_by_identity_key(identity_key)
        if existing is not None:
            return SyncResult(user=UserView.from_user(existing), created=False)

        created = self._users.insert(
            User(
                id=None,
                identity_key=identity_key,
                email=email,
                username=username,
                role=UserRole.STUDENT,
                xp_total=0,
                is_active=True,
            )
        )
        logger.info(
            "User provisioned from identity",
            extra={"user_id": created.id, "identity_key": identity_key},
        )
        return SyncResult(user=UserView.from_user(created), created=True)

    def create_admin(
        self, email: str, username: str, role: UserRole = UserRole.STUDENT
    ) -> UserResult:
        if self._users.find_by_email(email) is not None:
            return UserResult(
                error=UserError(
                    code=UserErrorCode.DUPLICATE_EMAIL,
                    message=f"A user with email '{email}' already exists.",
                )
            )

        created = self._users.insert(
            User(
                id=None,
                identity_key=None,
                email=email,
                username=username,
                role=role,
                xp_total=0,
                is_active=True,
            )
        )
        logger.info(
            "User created by admin",
            extra={"user_id": created.id, "role": created.role.value},
        )
        return UserResult(user=UserView.from_user(created))

    def list(self) -> List[UserView]:
        return [UserView.from_user(u) for u in self._users.list_all()]

    def get_by_id(self, user_id: int) -> UserView | None:
        user = self._users.find_by_id(user_id)
        return UserView.from_user(user) if user is not None else None

    def update(self, user_id: int, role: UserRole, is_active: bool) -> UserResult:
        if not self._users.update_role_and_active(user_id, role, is_active):
            return self._not_found(user_id)

        # R: Return what the store holds after the write, not the request values.
        updated = self._users.find_by_id(user_id)
        if updated is None:
            return self._not_found(user_id)

        logger.info(
            "User updated",
            extra={"user_id": user_id, "role": role.value, "is_active": is_active},
        )
        return UserResult(user=UserView.from_user(updated))

    def soft_delete(self, user_id: int) -> bool:
        deleted = self._users.soft_delete(user_id)
        if deleted:
            logger.info("User soft-deleted", extra={"user_id": user_id})
        return deleted

    @staticmethod
    def _not_found(user_id: int) -> UserResult:
        return UserResult(
            error=UserError(
                code=UserErrorCode.NOT_FOUND,
                message=f"User with ID {user_id} not found.",
            )
        )

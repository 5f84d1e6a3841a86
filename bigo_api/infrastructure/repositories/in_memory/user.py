"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserStore

Responsibilities:
  - Keep users in memory (tests / local dev without PostgreSQL).
  - Mirror PostgresUserStore semantics:
      - sequential integer ids starting at 1
      - empty identity key stored as None
      - listing ordered by created_at DESC, id DESC
      - update/soft delete report whether a row matched

Collaborators:
  - domain.entities.User, UserRole
  - domain.repositories.UserStore, ConnectionInfo

Constraints / Notes:
  - Thread-safe: every access goes through a Lock.
  - Entities are frozen; writes replace the stored instance.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional

from ....domain.entities import User, UserRole
from ....domain.repositories import ConnectionInfo, UserStore


class InMemoryUserStore(UserStore):
    """
    In-memory, thread-safe user store.

    Mental model:
    - _users is the in-memory "table" (id -> User).
    - _next_id plays the role of the SERIAL sequence.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[int, User] = {}
        self._next_id = 1

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _sorted(users: List[User]) -> List[User]:
        # R: Same order as Postgres: created_at DESC, id DESC.
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            users,
            key=lambda u: (u.created_at or oldest, u.id or 0),
            reverse=True,
        )

    # =========================================================
    # Reads
    # =========================================================
    def find_by_identity_key(self, identity_key: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.identity_key == identity_key:
                    return user
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def find_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_all(self) -> List[User]:
        with self._lock:
            values = list(self._users.values())
        return self._sorted(values)

    # =========================================================
    # Writes
    # =========================================================
    def insert(self, user: User) -> User:
        now = self._now()
        with self._lock:
            stored = replace(
                user,
                id=self._next_id,
                identity_key=user.identity_key or None,
                created_at=now,
                updated_at=now,
            )
            self._users[stored.id] = stored
            self._next_id += 1
        return stored

    def update_role_and_active(
        self, user_id: int, role: UserRole, is_active: bool
    ) -> bool:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return False
            self._users[user_id] = replace(
                current, role=role, is_active=is_active, updated_at=self._now()
            )
        return True

    def soft_delete(self, user_id: int) -> bool:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return False
            self._users[user_id] = replace(
                current, is_active=False, updated_at=self._now()
            )
        return True

    # =========================================================
    # Connectivity
    # =========================================================
    def ping(self) -> bool:
        return True

    def connection_info(self) -> ConnectionInfo:
        return ConnectionInfo(server="in-memory", database="in-memory")

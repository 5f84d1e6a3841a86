"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define the persistence contract for user accounts (port).
- Keep the application layer independent from PostgreSQL / in-memory storage.

Collaborators
- domain.entities: User, UserRole
- infrastructure.repositories: postgres and in-memory implementations

Constraints
- Pure interfaces only: no side effects, no SQL.
- Every method may raise DatabaseError when the store is unreachable;
  "not found" is None / False, never an exception.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol

from .entities import User, UserRole


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    """Server/database names reported by the diagnostic endpoint."""

    server: str
    database: str


class UserStore(Protocol):
    """
    R: Interface for the single `users` table.

    Implementations must provide:
      - Lookups by identity key, email and id
      - Unbounded listing ordered by created_at DESC, id DESC
      - Insert with re-read of the persisted row
      - Role/active update and soft delete reporting "matched"
      - Connectivity probes
    """

    def find_by_identity_key(self, identity_key: str) -> Optional[User]:
        ...

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    def list_all(self) -> List[User]:
        ...

    def insert(self, user: User) -> User:
        """R: Ignore user.id; empty identity_key is stored as NULL; return the stored row."""
        ...

    def update_role_and_active(
        self, user_id: int, role: UserRole, is_active: bool
    ) -> bool:
        """R: False when no row matched."""
        ...

    def soft_delete(self, user_id: int) -> bool:
        """R: Set is_active = false. False when no row matched."""
        ...

    def ping(self) -> bool:
        """R: True when the store answers a trivial query; DatabaseError otherwise."""
        ...

    def connection_info(self) -> ConnectionInfo:
        ...

"""User store implementations (PostgreSQL + in-memory)."""

from .in_memory.user import InMemoryUserStore
from .postgres.user import PostgresUserStore

__all__ = ["InMemoryUserStore", "PostgresUserStore"]

"""
============================================================
CRC CARD — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserStore

Responsibilities:
  - Run parameterized SQL against the `users` table (contract with migrations).
  - Lookups by identity key / email / id, ordered listing, insert + re-read,
    role/active update, soft delete, connectivity probes.
  - Map raw rows -> domain `User`, validating `UserRole` strictly.
  - Surface failures consistently as `DatabaseError` with structured logging.

Collaborators:
  - psycopg_pool.ConnectionPool (connection pool)
  - infrastructure.db.pool.get_pool (global pool accessor)
  - domain.entities.User / UserRole
  - crosscutting.exceptions.DatabaseError
  - crosscutting.logger.logger

Constraints / Notes:
  - Pure repository: no business rules (email uniqueness lives in the service).
  - Returns None / False when the row does not exist (no exception for "not found").
  - Persisted role outside UserRole -> DatabaseError.
  - Always parameterized SQL (never interpolate caller input).
  - Stable listing order: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import User, UserRole
from ....domain.repositories import ConnectionInfo


class PostgresUserStore:
    """R: PostgreSQL implementation of the user store."""

    # R: Explicit column list; mapping below depends on this order.
    _SELECT_COLUMNS = """
        id, identity_key, email, username, role,
        xp_total, is_active, created_at, updated_at
    """

    _ORDER_BY = "ORDER BY created_at DESC, id DESC"

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Injectable pool for tests; production resolves the global one lazily.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Mapping
    # =========================================================
    @staticmethod
    def _row_to_user(row: tuple) -> User:
        (
            user_id,
            identity_key,
            email,
            username,
            role,
            xp_total,
            is_active,
            created_at,
            updated_at,
        ) = row

        try:
            parsed_role = UserRole(role)
        except ValueError as exc:
            raise DatabaseError(f"Invalid user role in database: {role}") from exc

        return User(
            id=user_id,
            identity_key=identity_key,
            email=email,
            username=username,
            role=parsed_role,
            xp_total=xp_total,
            is_active=is_active,
            created_at=created_at,
            updated_at=updated_at,
        )

    # =========================================================
    # Execution helpers (consistent errors)
    # =========================================================
    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _execute_rowcount(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> int:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).rowcount
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _find_one(
        self, *, where_sql: str, params: tuple, context_msg: str, extra: dict
    ) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} FROM users WHERE {where_sql}",
            params=params,
            context_msg=context_msg,
            extra=extra,
        )
        return self._row_to_user(row) if row else None

    # =========================================================
    # Reads
    # =========================================================
    def find_by_identity_key(self, identity_key: str) -> Optional[User]:
        return self._find_one(
            where_sql="identity_key = %s",
            params=(identity_key,),
            context_msg="PostgresUserStore: find_by_identity_key failed",
            extra={"identity_key": identity_key},
        )

    def find_by_email(self, email: str) -> Optional[User]:
        # R: Exact match; email normalization is not applied anywhere.
        return self._find_one(
            where_sql="email = %s",
            params=(email,),
            context_msg="PostgresUserStore: find_by_email failed",
            extra={"email": email},
        )

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._find_one(
            where_sql="id = %s",
            params=(user_id,),
            context_msg="PostgresUserStore: find_by_id failed",
            extra={"user_id": user_id},
        )

    def list_all(self) -> list[User]:
        rows = self._fetchall(
            query=f"SELECT {self._SELECT_COLUMNS} FROM users {self._ORDER_BY}",
            params=(),
            context_msg="PostgresUserStore: list_all failed",
            extra={},
        )
        return [self._row_to_user(row) for row in rows]

    # =========================================================
    # Writes
    # =========================================================
    def insert(self, user: User) -> User:
        """
        Insert a user and return the persisted row.

        - user.id is ignored; the database assigns it.
        - created_at/updated_at come from column defaults.
        - An empty identity key is stored as NULL.
        """
        row = self._fetchone(
            query="""
                INSERT INTO users (identity_key, email, username, role, xp_total, is_active)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING id
            """,
            params=(
                user.identity_key or None,
                user.email,
                user.username,
                user.role.value,
                user.xp_total,
                user.is_active,
            ),
            context_msg="PostgresUserStore: insert failed",
            extra={"email": user.email},
        )
        if row is None:
            raise DatabaseError("PostgresUserStore: insert returned no id")

        new_id = row[0]
        created = self.find_by_id(new_id)
        if created is None:
            raise DatabaseError(
                f"PostgresUserStore: inserted user {new_id} could not be re-read"
            )
        return created

    def update_role_and_active(
        self, user_id: int, role: UserRole, is_active: bool
    ) -> bool:
        affected = self._execute_rowcount(
            query="""
                UPDATE users
                SET role = %s, is_active = %s, updated_at = now()
                WHERE id = %s
            """,
            params=(role.value, is_active, user_id),
            context_msg="PostgresUserStore: update_role_and_active failed",
            extra={"user_id": user_id, "role": role.value},
        )
        return affected > 0

    def soft_delete(self, user_id: int) -> bool:
        affected = self._execute_rowcount(
            query="""
                UPDATE users
                SET is_active = false, updated_at = now()
                WHERE id = %s
            """,
            params=(user_id,),
            context_msg="PostgresUserStore: soft_delete failed",
            extra={"user_id": user_id},
        )
        return affected > 0

    # =========================================================
    # Connectivity
    # =========================================================
    def ping(self) -> bool:
        """Trivial connectivity check."""
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.exception(
                "PostgresUserStore: ping failed", extra={"error": str(exc)}
            )
            raise DatabaseError(f"Ping failed: {exc}") from exc

    def connection_info(self) -> ConnectionInfo:
        row = self._fetchone(
            query="""
                SELECT coalesce(inet_server_addr()::text, 'local socket'),
                       current_database()
            """,
            params=(),
            context_msg="PostgresUserStore: connection_info failed",
            extra={},
        )
        if row is None:
            raise DatabaseError("PostgresUserStore: connection_info returned no row")
        return ConnectionInfo(server=row[0], database=row[1])

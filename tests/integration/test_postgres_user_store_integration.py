"""
Name: PostgresUserStore Integration Tests

Responsibilities:
  - Exercise the store against the migrated `users` table
  - Confirm column defaults, ordering and soft delete on a real server

Notes:
  - Requires RUN_INTEGRATION=1 and a reachable PostgreSQL
"""

import os

import pytest
from psycopg.errors import CheckViolation

from bigo_api.domain.entities import User, UserRole
from bigo_api.infrastructure.db.pool import get_pool
from bigo_api.infrastructure.repositories import PostgresUserStore

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("RUN_INTEGRATION") != "1",
        reason="Set RUN_INTEGRATION=1 to run integration tests",
    ),
]


@pytest.fixture
def store():
    with get_pool().connection() as conn:
        conn.execute("TRUNCATE users RESTART IDENTITY")
    return PostgresUserStore()


def _user(email: str, identity_key: str | None = None, role=UserRole.STUDENT) -> User:
    return User(
        id=None,
        identity_key=identity_key,
        email=email,
        username=email.split("@")[0],
        role=role,
    )


class TestPostgresUserStore:
    def test_insert_applies_defaults(self, store):
        created = store.insert(_user("a@b.com", identity_key="user_a"))

        assert created.id == 1
        assert created.identity_key == "user_a"
        assert created.xp_total == 0
        assert created.is_active is True
        assert created.created_at is not None
        assert created.updated_at is not None

    def test_empty_identity_key_persisted_as_null(self, store):
        created = store.insert(_user("a@b.com", identity_key=""))
        assert created.identity_key is None

    def test_lookups(self, store):
        created = store.insert(_user("a@b.com", identity_key="user_a"))

        assert store.find_by_identity_key("user_a") == created
        assert store.find_by_email("a@b.com") == created
        assert store.find_by_email("A@B.com") is None
        assert store.find_by_id(created.id) == created
        assert store.find_by_id(9999) is None

    def test_list_newest_first(self, store):
        store.insert(_user("first@b.com"))
        store.insert(_user("second@b.com"))

        assert [u.email for u in store.list_all()] == ["second@b.com", "first@b.com"]

    def test_update_and_soft_delete(self, store):
        created = store.insert(_user("a@b.com"))

        assert store.update_role_and_active(created.id, UserRole.ADMIN, True) is True
        assert store.find_by_id(created.id).role == UserRole.ADMIN

        assert store.soft_delete(created.id) is True
        assert store.find_by_id(created.id).is_active is False

        assert store.update_role_and_active(9999, UserRole.ADMIN, True) is False
        assert store.soft_delete(9999) is False

    def test_role_check_constraint(self, store):
        with pytest.raises(CheckViolation):
            with get_pool().connection() as conn:
                conn.execute(
                    "INSERT INTO users (email, username, role) VALUES (%s, %s, %s)",
                    ("x@y.com", "x", "Superuser"),
                )

    def test_connectivity(self, store):
        assert store.ping() is True
        info = store.connection_info()
        assert info.database
        assert info.server

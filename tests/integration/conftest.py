"""
Name: Integration Test DB Setup

Responsibilities:
  - Ensure the users schema exists before integration tests run
  - Run Alembic migrations once per test session
  - Open the global connection pool for the session

Notes:
  - Only runs when RUN_INTEGRATION=1
  - Uses DATABASE_URL from environment when it points to a reachable server,
    otherwise the local default below
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import pytest
from alembic import command
from alembic.config import Config
from psycopg import connect

from bigo_api.crosscutting.config import get_settings
from bigo_api.infrastructure.db.pool import close_pool, init_pool

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")
DB_PORT = os.getenv("POSTGRES_HOST_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "bigo")
DEFAULT_DATABASE_URL = (
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"


def _reachable(url: str) -> Optional[Exception]:
    try:
        with connect(url, autocommit=True, connect_timeout=2) as conn:
            conn.execute("SELECT 1")
        return None
    except Exception as exc:
        return exc


def _resolve_database_url() -> str:
    explicit_url = os.getenv("DATABASE_URL")
    if explicit_url and _reachable(explicit_url) is None:
        return explicit_url

    exc = _reachable(DEFAULT_DATABASE_URL)
    if exc is None:
        return DEFAULT_DATABASE_URL

    raise RuntimeError(
        "PostgreSQL is required for integration tests. "
        "Set DATABASE_URL or start a local server."
    ) from exc


if RUN_INTEGRATION:
    os.environ["APP_ENV"] = "integration"
    os.environ["DATABASE_URL"] = _resolve_database_url()
    get_settings.cache_clear()


@pytest.fixture(scope="session", autouse=True)
def apply_migrations() -> None:
    """Run Alembic migrations for integration tests."""
    if not RUN_INTEGRATION:
        return

    root_dir = Path(__file__).resolve().parents[2]
    config = Config(str(root_dir / "alembic.ini"))
    config.set_main_option("script_location", str(root_dir / "alembic"))

    command.upgrade(config, "head")


@pytest.fixture(scope="session", autouse=True)
def init_db_pool(apply_migrations):
    if not RUN_INTEGRATION:
        yield
        return

    settings = get_settings()
    init_pool(
        database_url=settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    yield
    close_pool()

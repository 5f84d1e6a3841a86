"""
============================================================
CRC CARD
============================================================
Module: 001_users (Alembic migration)

Responsibilities:
  - Create the `users` table used by the user stores.
  - Index the lookup columns (identity_key, email) and the listing order.

Collaborators:
  - PostgreSQL 14+
  - infrastructure/repositories/postgres/user.py (column contract)

Policy:
  - identity_key and email are NOT unique at the database level; uniqueness
    is a read-then-write check in the application.
  - Naming convention:
      pk_<table>        - Primary keys
      ix_<table>_<col>  - Indexes
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_users"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        # NULL for admin-created users (no identity provider subject yet).
        sa.Column("identity_key", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'Student'"),
        ),
        sa.Column(
            "xp_total",
            sa.Integer,
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.CheckConstraint(
            "role IN ('Student', 'Admin', 'Instructor')",
            name="ck_users_role",
        ),
    )

    op.create_index("ix_users_identity_key", "users", ["identity_key"])
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_created_at", "users", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_identity_key", table_name="users")
    op.drop_table("users")

"""Initial schema: users, media_items, demo_accounts

Revision ID: 0001
Revises:
Create Date: 2025-01-01 00:00:00
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MEDIA_TYPES = ("movie", "show")
WATCH_STATUSES = ("watched", "unwatched", "watching")
GENRES = (
    "Action", "Adventure", "Animation", "Comedy", "Crime", "Documentary",
    "Drama", "Family", "Fantasy", "Horror", "Mystery", "Romance",
    "Sci-Fi", "Thriller", "War", "Western", "Other",
)


def _in_list(column: str, values: Sequence[str]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── media_items ───────────────────────────────────────────────────────────
    op.create_table(
        "media_items",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("owner_id", sa.Uuid,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("media_type", sa.String(32), nullable=False),
        sa.Column("genre", sa.String(32), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="unwatched"),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("release_year", sa.Integer, nullable=True),
        sa.Column("poster", sa.String(2048), nullable=True),
        sa.Column("imdb_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        # Authoritative duplicate guard; services map violations to a duplicate error
        sa.UniqueConstraint("owner_id", "title", "media_type",
                            name="uq_media_items_owner_title_type"),
        sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 10)",
                           name="chk_media_items_rating"),
        sa.CheckConstraint("release_year IS NULL OR release_year >= 1900",
                           name="chk_media_items_release_year"),
        sa.CheckConstraint(_in_list("media_type", MEDIA_TYPES),
                           name="chk_media_items_media_type"),
        sa.CheckConstraint(_in_list("status", WATCH_STATUSES),
                           name="chk_media_items_status"),
        sa.CheckConstraint(_in_list("genre", GENRES),
                           name="chk_media_items_genre"),
    )
    op.create_index("idx_media_items_owner_type", "media_items", ["owner_id", "media_type"])
    op.create_index("idx_media_items_owner_genre", "media_items", ["owner_id", "genre"])
    op.create_index("idx_media_items_owner_status", "media_items", ["owner_id", "status"])
    op.create_index("idx_media_items_owner_created", "media_items", ["owner_id", "created_at"])

    # ── demo_accounts ─────────────────────────────────────────────────────────
    op.create_table(
        "demo_accounts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )
    op.create_index("ix_demo_accounts_email", "demo_accounts", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_demo_accounts_email", table_name="demo_accounts")
    op.drop_table("demo_accounts")
    op.drop_index("idx_media_items_owner_created", table_name="media_items")
    op.drop_index("idx_media_items_owner_status", table_name="media_items")
    op.drop_index("idx_media_items_owner_genre", table_name="media_items")
    op.drop_index("idx_media_items_owner_type", table_name="media_items")
    op.drop_table("media_items")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

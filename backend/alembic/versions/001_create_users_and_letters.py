"""Create users and letters tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: `users` (Google identity + stored OAuth tokens) and
       `letters` (owner-scoped rich-text letters).
Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Primary email from the Google profile",
        ),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            server_default=sa.text("''"),
            comment="Display name; falls back to the email local part",
        ),
        sa.Column(
            "google_id",
            sa.String(255),
            nullable=True,
            comment="Google account id (userinfo `id`)",
        ),
        sa.Column("access_token", sa.Text(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column(
            "token_expiry",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When access_token stops being accepted by Google (UTC)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "letters",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Serialized HTML from the rich-text editor",
        ),
        sa.Column(
            "is_draft",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Owning user; immutable after creation",
        ),
        sa.Column(
            "google_doc_id",
            sa.String(255),
            nullable=True,
            comment="Google Docs document id, set after a successful export",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_letters_user_created", "letters", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_letters_user_created", table_name="letters")
    op.drop_table("letters")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

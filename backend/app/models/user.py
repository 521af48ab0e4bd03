"""
Letter Writer Backend — User SQLAlchemy Model
===============================================

What:  ORM model representing the `users` table.
How:   Inherits from the declarative Base; Alembic reads this for migrations.
Who:   Written by UserService on every Google sign-in and by CredentialService
       after a token refresh; read by the auth and export flows.

Lifecycle:
    1. Created on the first successful OAuth callback for an email address
    2. Updated on every later sign-in (new tokens) and every token refresh
    3. Tokens cleared by GET /api/auth/reset
    4. Never deleted by the application
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A person who signed in with Google, plus their stored Google tokens."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Identity ──────────────────────────────────────────────────────────
    # Upserts are keyed by email (unique); google_id is the provider's subject
    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Primary email from the Google profile",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Display name; falls back to the email local part",
    )
    google_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Google account id (userinfo `id`)",
    )

    # ── Google OAuth Tokens ───────────────────────────────────────────────
    # token_expiry is stored in UTC; NULL means "unknown, treat as valid"
    access_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    token_expiry: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When access_token stops being accepted by Google (UTC)",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

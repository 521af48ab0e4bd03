"""
Letter Writer Backend — Letter SQLAlchemy Model
=================================================

What:  ORM model representing the `letters` table.
Who:   Used by LetterService for owner-scoped CRUD and by DocsExportService,
       which records the exported Google Doc id.

Table notes:
    - content holds the editor's serialized HTML, unbounded (TEXT)
    - user_id is the owner; it is set on create and never changed
    - google_doc_id stays NULL until an export succeeds
    - idx_letters_user_created serves "list my letters, oldest first"
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.user import utcnow


class Letter(Base):
    """A rich-text letter owned by exactly one user."""

    __tablename__ = "letters"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
        server_default=text("''"),
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Serialized HTML from the rich-text editor",
    )
    is_draft: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        comment="Owning user; immutable after creation",
    )

    google_doc_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Google Docs document id, set after a successful export",
    )

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

    __table_args__ = (
        Index("idx_letters_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Letter(id={self.id}, user_id={self.user_id}, "
            f"is_draft={self.is_draft})>"
        )

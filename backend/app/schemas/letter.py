"""
Letter Writer Backend — Letter Schemas
========================================

What:  Request and response models for /api/letters.
How:   FastAPI validates request bodies against LetterCreate / LetterUpdate
       and serializes Letter rows through LetterResponse (by alias).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class LetterCreate(CamelModel):
    """Body of POST /api/letters."""

    title: str = Field(max_length=500, description="Letter title")
    content: str = Field(default="", description="Serialized HTML from the editor")
    is_draft: bool = Field(default=True, description="Unpublished flag")


class LetterUpdate(CamelModel):
    """
    Body of PUT /api/letters/{id}.

    Only fields present in the request are applied; omitted fields keep
    their stored values. The owner cannot be changed through this model.
    """

    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None
    is_draft: Optional[bool] = None


class LetterResponse(CamelModel):
    """A letter as returned to its owner."""

    id: uuid.UUID
    title: str
    content: str
    is_draft: bool
    user_id: uuid.UUID
    google_doc_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SaveToDriveResponse(CamelModel):
    """Result of POST /api/letters/{id}/save-to-drive."""

    document_id: str = Field(description="Google Docs document id")

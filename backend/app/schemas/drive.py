"""
Letter Writer Backend — Drive Schemas
=======================================

What:  Request and response models for /api/drive.
"""

from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class DriveSaveRequest(CamelModel):
    title: str = Field(max_length=500)
    content: str = Field(default="", description="HTML or plain text to upload")


class DriveFileResponse(CamelModel):
    """A Google Docs file visible to the app (drive.file scope)."""

    id: str
    name: str
    mime_type: Optional[str] = None
    web_view_link: Optional[str] = None
    created_time: Optional[str] = None


class DriveFileContentResponse(CamelModel):
    file_id: str
    content: str = Field(description="Plain-text export of the document")

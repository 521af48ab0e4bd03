"""
Letter Writer Backend — Drive Route Handlers
==============================================

What:  Direct Google Drive access for the signed-in user.

    POST /api/drive/save                    { id, name, webViewLink }
    GET  /api/drive/files                   DriveFile[] (newest first)
    GET  /api/drive/files/{fileId}/content  { fileId, content }
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_identity
from app.schemas.auth import SessionIdentity
from app.schemas.common import ErrorResponse
from app.schemas.drive import (
    DriveFileContentResponse,
    DriveFileResponse,
    DriveSaveRequest,
)
from app.services.drive_service import drive_service
from app.services.user_service import user_service

router = APIRouter(
    prefix="/api/drive",
    tags=["Drive"],
    responses={
        401: {"description": "No session token or Google access lost", "model": ErrorResponse},
        503: {"description": "Google API not enabled", "model": ErrorResponse},
    },
)


@router.post("/save", response_model=DriveFileResponse, summary="Save HTML as a Google Doc")
async def save_to_drive(
    data: DriveSaveRequest,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> DriveFileResponse:
    user = await user_service.get_user(db, identity.user_id)
    created = await drive_service.save_document(db, user, data.title, data.content)
    return DriveFileResponse.model_validate(created)


@router.get("/files", response_model=List[DriveFileResponse], summary="List my Google Docs")
async def list_files(
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[DriveFileResponse]:
    user = await user_service.get_user(db, identity.user_id)
    files = await drive_service.list_documents(db, user)
    return [DriveFileResponse.model_validate(item) for item in files]


@router.get(
    "/files/{file_id}/content",
    response_model=DriveFileContentResponse,
    summary="Plain-text content of a Google Doc",
)
async def get_file_content(
    file_id: str,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> DriveFileContentResponse:
    user = await user_service.get_user(db, identity.user_id)
    content = await drive_service.get_document_text(db, user, file_id)
    return DriveFileContentResponse(file_id=file_id, content=content)

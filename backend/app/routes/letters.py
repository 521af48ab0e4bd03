"""
Letter Writer Backend — Letter Route Handlers
===============================================

What:  CRUD for the caller's letters and export to Google Docs.
How:   Every route requires a session token (get_current_identity) and
       delegates to LetterService / DocsExportService, which enforce
       ownership. Errors are mapped by the global handlers in main.py.

    POST   /api/letters                      201 Letter
    GET    /api/letters                      Letter[] (oldest first), X-Total-Count
    GET    /api/letters/{id}                 Letter
    PUT    /api/letters/{id}                 Letter
    DELETE /api/letters/{id}                 204
    POST   /api/letters/{id}/save-to-drive   { documentId }
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_identity
from app.schemas.auth import SessionIdentity
from app.schemas.common import ErrorResponse
from app.schemas.letter import (
    LetterCreate,
    LetterResponse,
    LetterUpdate,
    SaveToDriveResponse,
)
from app.services.docs_export_service import docs_export_service
from app.services.letter_service import letter_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/letters",
    tags=["Letters"],
    responses={
        401: {"description": "No session token", "model": ErrorResponse},
        403: {"description": "Invalid session token or not the owner", "model": ErrorResponse},
    },
)

_single_letter_errors = {
    404: {"description": "Letter not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=LetterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a letter",
)
async def create_letter(
    data: LetterCreate,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> LetterResponse:
    letter = await letter_service.create(db, data, identity.user_id)
    return LetterResponse.model_validate(letter)


@router.get(
    "",
    response_model=List[LetterResponse],
    summary="List my letters",
)
async def list_letters(
    response: Response,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[LetterResponse]:
    letters = await letter_service.list_letters(db, identity.user_id)
    response.headers["X-Total-Count"] = str(len(letters))
    return [LetterResponse.model_validate(letter) for letter in letters]


@router.get(
    "/{letter_id}",
    response_model=LetterResponse,
    responses=_single_letter_errors,
    summary="Get a letter",
)
async def get_letter(
    letter_id: UUID,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> LetterResponse:
    letter = await letter_service.get_owned_letter(db, letter_id, identity.user_id)
    return LetterResponse.model_validate(letter)


@router.put(
    "/{letter_id}",
    response_model=LetterResponse,
    responses=_single_letter_errors,
    summary="Update a letter",
)
async def update_letter(
    letter_id: UUID,
    data: LetterUpdate,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> LetterResponse:
    letter = await letter_service.update(db, letter_id, identity.user_id, data)
    return LetterResponse.model_validate(letter)


@router.delete(
    "/{letter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_single_letter_errors,
    summary="Delete a letter",
)
async def delete_letter(
    letter_id: UUID,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await letter_service.delete(db, letter_id, identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{letter_id}/save-to-drive",
    response_model=SaveToDriveResponse,
    responses={
        **_single_letter_errors,
        500: {"description": "Google API error", "model": ErrorResponse},
        503: {"description": "Google Docs API not enabled", "model": ErrorResponse},
    },
    summary="Export a letter to Google Docs",
)
async def save_to_drive(
    letter_id: UUID,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> SaveToDriveResponse:
    """
    Creates a new Google Doc from the letter. 401 responses for lost Google
    access carry `error` (missing_token / expired_token) and `redirectUrl`.
    """
    document_id = await docs_export_service.export_letter(db, letter_id, identity.user_id)
    return SaveToDriveResponse(document_id=document_id)

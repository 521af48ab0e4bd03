"""
Letter Writer Backend — Letter Service
========================================

What:  Owner-scoped CRUD for letters.
How:   Every single-letter operation loads the row through
       get_owned_letter(), which applies authorize_letter_access().
Who:   Letter routes and DocsExportService.

Access outcomes:
    row missing               → NotFoundError  (404)
    row owned by someone else → ForbiddenError (403), body never returned
    otherwise                 → the Letter

Concurrent update/delete of one letter is last-write-wins; no locking.
"""

import logging
import uuid
from typing import List

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, ForbiddenError, NotFoundError
from app.models.letter import Letter
from app.schemas.letter import LetterCreate, LetterUpdate

logger = logging.getLogger(__name__)


def authorize_letter_access(letter: Letter, owner_id: uuid.UUID) -> Letter:
    """
    Ownership policy shared by get, update, delete and export.

    Raises:
        ForbiddenError: The letter belongs to another user
    """
    if letter.user_id != owner_id:
        logger.warning(
            "User %s denied access to letter %s owned by %s",
            owner_id,
            letter.id,
            letter.user_id,
        )
        raise ForbiddenError(
            message="Not authorized to access this letter",
            context={"letter_id": str(letter.id)},
        )
    return letter


class LetterService:
    """Letter persistence with ownership enforcement."""

    async def create(
        self,
        db: AsyncSession,
        data: LetterCreate,
        owner_id: uuid.UUID,
    ) -> Letter:
        try:
            letter = Letter(
                title=data.title,
                content=data.content,
                is_draft=data.is_draft,
                user_id=owner_id,
            )
            db.add(letter)
            await db.flush()
            await db.refresh(letter)
            logger.info("Letter %s created by user %s", letter.id, owner_id)
            return letter
        except SQLAlchemyError as e:
            logger.error("Database error creating letter: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the letter. Please try again.",
                context={"owner_id": str(owner_id)},
            )

    async def list_letters(self, db: AsyncSession, owner_id: uuid.UUID) -> List[Letter]:
        """The owner's letters, oldest first."""
        try:
            result = await db.execute(
                select(Letter)
                .where(Letter.user_id == owner_id)
                .order_by(asc(Letter.created_at), asc(Letter.id))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing letters: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve letters. Please try again.",
                context={"owner_id": str(owner_id)},
            )

    async def get_owned_letter(
        self,
        db: AsyncSession,
        letter_id: uuid.UUID,
        owner_id: uuid.UUID,
    ) -> Letter:
        """
        Fetch a letter by id and apply the ownership policy.

        Raises:
            NotFoundError: No letter with this id
            ForbiddenError: Letter owned by another user
            DatabaseError: Query failed
        """
        try:
            letter = await db.get(Letter, letter_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching letter %s: %s", letter_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the letter. Please try again.",
                context={"letter_id": str(letter_id)},
            )

        if letter is None:
            raise NotFoundError(resource="letter", resource_id=str(letter_id))
        return authorize_letter_access(letter, owner_id)

    async def update(
        self,
        db: AsyncSession,
        letter_id: uuid.UUID,
        owner_id: uuid.UUID,
        data: LetterUpdate,
    ) -> Letter:
        letter = await self.get_owned_letter(db, letter_id, owner_id)
        changes = data.model_dump(exclude_unset=True)
        try:
            for field, value in changes.items():
                # NULLs are not stored for these columns; treat null as "unchanged"
                if value is not None:
                    setattr(letter, field, value)
            await db.flush()
            await db.refresh(letter)
            logger.info("Letter %s updated (%s)", letter.id, ", ".join(sorted(changes)) or "no fields")
            return letter
        except SQLAlchemyError as e:
            logger.error("Database error updating letter %s: %s", letter_id, str(e))
            raise DatabaseError(
                message="Could not update the letter. Please try again.",
                context={"letter_id": str(letter_id)},
            )

    async def delete(
        self,
        db: AsyncSession,
        letter_id: uuid.UUID,
        owner_id: uuid.UUID,
    ) -> None:
        letter = await self.get_owned_letter(db, letter_id, owner_id)
        try:
            await db.delete(letter)
            await db.flush()
            logger.info("Letter %s deleted by user %s", letter_id, owner_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting letter %s: %s", letter_id, str(e))
            raise DatabaseError(
                message="Could not delete the letter. Please try again.",
                context={"letter_id": str(letter_id)},
            )

    async def set_google_doc_id(self, db: AsyncSession, letter: Letter, document_id: str) -> Letter:
        try:
            letter.google_doc_id = document_id
            await db.flush()
            return letter
        except SQLAlchemyError as e:
            logger.error("Database error recording export of %s: %s", letter.id, str(e))
            raise DatabaseError(context={"letter_id": str(letter.id)})


letter_service = LetterService()

"""
Letter Writer Backend — User Service
======================================

What:  Creates and updates User records from Google sign-ins and clears
       stored Google tokens.
Who:   Auth routes. CredentialService writes refreshed tokens itself.

Upsert rules (keyed by email):
    - new user: name falls back to the email local part
    - google_id is filled in if it was missing
    - access token and expiry always replaced
    - refresh token replaced only when Google issued a new one
"""

import logging
import uuid
from datetime import timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.user import User
from app.schemas.auth import GoogleProfile, GoogleTokens

logger = logging.getLogger(__name__)


def _as_utc(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserService:

    async def upsert_from_google(
        self,
        db: AsyncSession,
        profile: GoogleProfile,
        tokens: GoogleTokens,
    ) -> User:
        try:
            result = await db.execute(select(User).where(User.email == profile.email))
            user = result.scalar_one_or_none()

            if user is None:
                user = User(
                    email=profile.email,
                    name=profile.name or profile.email.split("@")[0],
                    google_id=profile.id or None,
                )
                db.add(user)
                logger.info("Creating user for %s", profile.email)

            if not user.google_id and profile.id:
                user.google_id = profile.id

            user.access_token = tokens.access_token
            user.token_expiry = _as_utc(tokens.expiry)
            if tokens.refresh_token:
                user.refresh_token = tokens.refresh_token

            await db.flush()
            return user

        except SQLAlchemyError as e:
            logger.error("Database error upserting user %s: %s", profile.email, str(e))
            raise DatabaseError(context={"email": profile.email})

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Raises NotFoundError if the user no longer exists."""
        user = await self.find_user(db, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def find_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        try:
            return await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": str(user_id)})

    async def clear_google_tokens(self, db: AsyncSession, user: User) -> None:
        try:
            user.access_token = None
            user.refresh_token = None
            user.token_expiry = None
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error clearing tokens for user %s: %s", user.id, str(e))
            raise DatabaseError(context={"user_id": str(user.id)})
        logger.info("Cleared Google tokens for user %s", user.id)


user_service = UserService()

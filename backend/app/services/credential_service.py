"""
Letter Writer Backend — Google Credential Lifecycle
=====================================================

What:  Turns the tokens stored on a User into usable Google API credentials,
       refreshing an expired access token once.
Who:   DocsExportService and DriveService, around every remote call.

State machine:
    NoToken        no stored access token         → MissingCredentialError
    TokenValid     expiry unknown or not passed   → credentials
    TokenExpired   expiry earlier than now        → one refresh attempt
        ok   → TokenRefreshed: tokens + expiry written to the user and
                               committed, then credentials returned
        fail → ExpiredCredentialError

Two concurrent requests for the same user may both refresh; the later
write wins. There is no retry beyond the single refresh.

The Google client may also refresh on its own mid-call (a 401 retry);
callers hand the credentials back to save_refreshed_token afterwards.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import google.auth.transport.requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import DatabaseError, ExpiredCredentialError, MissingCredentialError
from app.models.user import User
from app.services.google_auth_service import google_auth_service

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(expiry: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """An unknown expiry counts as valid; expiry equal to now is still valid."""
    if expiry is None:
        return False
    now = now or datetime.now(timezone.utc)
    return _as_utc(expiry) < _as_utc(now)


class CredentialService:

    async def get_valid_credentials(self, db: AsyncSession, user: User) -> Credentials:
        """
        Credentials for the user's Google account, refreshed if expired.

        Raises:
            MissingCredentialError: No stored access token
            ExpiredCredentialError: Token expired and the refresh failed
        """
        if not user.access_token:
            logger.info("User %s has no stored Google access token", user.id)
            raise MissingCredentialError(redirect_url=settings.reauth_url)

        credentials = google_auth_service.build_credentials(
            user.access_token,
            user.refresh_token,
            expiry=user.token_expiry,
        )
        if not is_expired(user.token_expiry):
            return credentials

        logger.info("Google access token for user %s expired, refreshing", user.id)
        if not user.refresh_token:
            raise ExpiredCredentialError(
                redirect_url=settings.reauth_url,
                context={"reason": "no_refresh_token"},
            )

        try:
            await run_in_threadpool(
                credentials.refresh,
                google.auth.transport.requests.Request(),
            )
        except (GoogleAuthError, ValueError) as e:
            logger.warning("Token refresh failed for user %s: %s", user.id, str(e))
            raise ExpiredCredentialError(
                redirect_url=settings.reauth_url,
                context={"error": str(e)},
            )

        _store_tokens(user, credentials)
        # Committed now so a failing document call cannot roll the new token back
        await db.commit()
        logger.info("Refreshed Google access token for user %s", user.id)
        return credentials

    async def save_refreshed_token(
        self,
        db: AsyncSession,
        user: User,
        credentials: Credentials,
    ) -> None:
        """
        Persist a token the Google client refreshed by itself during a call.

        The authorized transport refreshes on a 401 or inside google-auth's
        expiry window and retries; without this the stored token would stay
        the stale one. No-op when the token did not change.
        """
        if not credentials.token or credentials.token == user.access_token:
            return
        try:
            _store_tokens(user, credentials)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving refreshed token for %s: %s", user.id, str(e))
            raise DatabaseError(context={"user_id": str(user.id)})
        logger.info("Saved Google access token refreshed during a call for user %s", user.id)


def _store_tokens(user: User, credentials: Credentials) -> None:
    user.access_token = credentials.token
    if credentials.refresh_token:
        user.refresh_token = credentials.refresh_token
    user.token_expiry = _as_utc(credentials.expiry) if credentials.expiry else None


credential_service = CredentialService()

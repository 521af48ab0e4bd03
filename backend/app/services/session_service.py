"""
Letter Writer Backend — Session Token Service
===============================================

What:  Issues and verifies the short-lived bearer tokens the SPA sends on
       every protected request.
How:   HS256 JWT (python-jose) signed with JWT_SECRET. Claims:
           sub    user id (UUID string)
           email  user email
           iat    issue time
           exp    expiry (default 60 minutes after issue)
Who:   issue_token() is called by the OAuth callback; verify_token() by the
       get_current_identity dependency.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.exceptions import InvalidTokenError
from app.schemas.auth import SessionIdentity

logger = logging.getLogger(__name__)


class SessionService:
    """Stateless signer/verifier for session tokens."""

    def issue_token(
        self,
        user_id: uuid.UUID,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Sign a session token for a user.

        Args:
            user_id: Owner id placed in the `sub` claim
            email: User email placed in the `email` claim
            expires_delta: Lifetime override (tests use negative deltas)

        Returns:
            Compact JWS string
        """
        now = datetime.now(timezone.utc)
        lifetime = expires_delta if expires_delta is not None else timedelta(
            minutes=settings.jwt_expires_minutes
        )
        claims = {
            "sub": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
        }
        return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def verify_token(self, token: str) -> SessionIdentity:
        """
        Verify signature and expiry, then return the identity the token carries.

        Raises:
            InvalidTokenError: Expired, tampered, signed with another secret,
                               malformed, or missing the sub/email claims
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            logger.info("Rejected expired session token")
            raise InvalidTokenError(context={"reason": "expired"})
        except JWTError as e:
            logger.info("Rejected session token: %s", str(e))
            raise InvalidTokenError(context={"reason": "invalid"})

        subject = payload.get("sub")
        email = payload.get("email")
        if not subject or not email:
            raise InvalidTokenError(context={"reason": "missing_claims"})

        try:
            user_id = uuid.UUID(str(subject))
        except ValueError:
            raise InvalidTokenError(context={"reason": "bad_subject"})

        return SessionIdentity(user_id=user_id, email=email)


session_service = SessionService()
